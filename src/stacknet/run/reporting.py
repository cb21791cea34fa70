"""
Reporting Module

Observers receive one TrainingStep per call to 'Network.backpropagate()'.
They only display or store what they receive; they never feed anything back
into training.

Classes:
    ProgressObserver: Abstract base class for training progress observers
    ConsoleReporter:  Prints the statistics of every step
    HistoryRecorder:  Keeps every step in a list
"""

import sys
import numpy as np
from abc    import ABC, abstractmethod
from typing import TextIO, TYPE_CHECKING

if TYPE_CHECKING:
    from stacknet.phenotype.statistics import TrainingStep

class ProgressObserver(ABC):
    """
    Receives the statistics of each training step.
    """

    @abstractmethod
    def on_step(self, step: 'TrainingStep') -> None:
        pass

def _format_vector(values) -> str:
    if values is None:
        return "-"
    return "[" + ", ".join(f"{v:+.4f}" for v in np.atleast_1d(values)) + "]"

class ConsoleReporter(ProgressObserver):
    """
    Prints, for each training step: the example count, the guess and the
    expected outputs, the error, the running average error and, whenever a
    window completes, the sliding-window average.

    Parameters:
        stream: where to print (default: standard output)
        every:  print one step out of 'every' (window averages are always printed)
    """

    def __init__(self, stream: TextIO | None = None, every: int = 1):
        if every < 1:
            raise ValueError(f"'every' must be positive, got {every}")
        self._stream = stream
        self._every  = every

    def on_step(self, step: 'TrainingStep') -> None:
        window_done = step.sliding_window_average is not None
        if step.example_count % self._every != 0 and not window_done:
            return

        stream = self._stream if self._stream is not None else sys.stdout
        print(f"Examples: {step.example_count}", file=stream)
        print(f"\tGuess : {_format_vector(step.outputs)}", file=stream)
        print(f"\tActual: {_format_vector(step.targets)}", file=stream)
        print(f"\tERROR : {step.error}", file=stream)
        print(f"\tAVGERR: {step.average_error}", file=stream)
        if window_done:
            print(f"\tSLDERR: {step.sliding_window_average}", file=stream)

class HistoryRecorder(ProgressObserver):
    """
    Keeps every TrainingStep it receives.

    Public Attributes:
        steps: the recorded steps, oldest first

    Public Properties:
        errors: the error of each recorded step
    """

    def __init__(self):
        self.steps: list['TrainingStep'] = []

    def on_step(self, step: 'TrainingStep') -> None:
        self.steps.append(step)

    @property
    def errors(self) -> list[float]:
        return [step.error for step in self.steps]
