"""
Training Statistics Module

Running error statistics kept by a network while it trains. They are for
display only: nothing in the training arithmetic reads them.

Classes:
    TrainingStep:       Snapshot of the statistics after one training example
    TrainingStatistics: Accumulator of cumulative and sliding-window error
"""

import numpy as np
from typing import Optional

class TrainingStep:
    """
    What happened on one training example.

    Public Attributes:
        example_count:          Number of examples seen so far (this one included)
        error:                  Loss summed over the output units for this example
        average_error:          Mean error over all examples seen so far
        sliding_window_average: Mean error over the last window of examples; only set
                                on the example that completes a window, None otherwise
        outputs:                The network outputs the error was computed from
        targets:                The expected outputs
    """

    def __init__(self,
                 example_count         : int,
                 error                 : float,
                 average_error         : float,
                 sliding_window_average: Optional[float],
                 outputs               : np.ndarray,
                 targets               : np.ndarray):
        self.example_count          = example_count
        self.error                  = error
        self.average_error          = average_error
        self.sliding_window_average = sliding_window_average
        self.outputs                = outputs
        self.targets                = targets

    def __repr__(self):
        return (f"TrainingStep(example_count={self.example_count}, error={self.error}, "
                f"average_error={self.average_error}, "
                f"sliding_window_average={self.sliding_window_average})")

class TrainingStatistics:
    """
    Cumulative and sliding-window error over the examples a network trained on.

    The sliding window is a tumbling window: its sum is reported and cleared
    every 'sliding_window_size' examples.

    Public Attributes:
        sliding_window_size:  Number of examples per window
        examples_seen:        Number of examples recorded
        error:                Error of the most recent example (None before the first)
        total_error:          Sum of the errors of all examples
        sliding_window_error: Sum of the errors in the current (incomplete) window

    Public Properties:
        average_error: Mean error over all examples (None before the first)

    Public Methods:
        record(error, outputs, targets): Add one example and return its TrainingStep
        reset():                         Forget all examples
    """

    def __init__(self, sliding_window_size: int = 200):
        if sliding_window_size < 1:
            raise ValueError(f"Sliding window size must be positive, got {sliding_window_size}")
        self.sliding_window_size: int = sliding_window_size
        self.reset()

    def reset(self) -> None:
        self.examples_seen       : int             = 0
        self.error               : Optional[float] = None
        self.total_error         : float           = 0.0
        self.sliding_window_error: float           = 0.0

    @property
    def average_error(self) -> Optional[float]:
        if self.examples_seen == 0:
            return None
        return self.total_error / self.examples_seen

    def record(self, error: float, outputs=None, targets=None) -> TrainingStep:
        """
        Add the error of one training example.

        Returns:
            the TrainingStep describing the statistics after this example
        """
        self.examples_seen        += 1
        self.error                 = error
        self.total_error          += error
        self.sliding_window_error += error

        window_average = None
        if self.examples_seen % self.sliding_window_size == 0:
            window_average = self.sliding_window_error / self.sliding_window_size
            self.sliding_window_error = 0.0

        return TrainingStep(self.examples_seen, error, self.average_error, window_average, outputs, targets)
