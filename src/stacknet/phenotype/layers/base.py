"""
Layer Base Module

This module defines the abstract base class shared by every layer variant, and
the LayerType enumeration that tags them.

Every layer, whatever its arithmetic, honours the same protocol:
    - evaluate_all_units(): compute the layer's outputs from its source's outputs
    - backpropagate():      consume the error signal accumulated on the layer's units,
                            update the layer's parameters and pass the error signal
                            on to the units of the source layer
    - outputs():            the current output vector
    - parameter provider:   number_parameters / get_parameters() / set_parameters(),
                            the layer's share of the network genome
    - blueprint():          what is needed to build the same layer on another network

Classes:
    LayerType: Enumeration of the layer variants
    Layer:     Abstract base class defining the layer interface
"""

import numpy as np
from abc    import ABC, abstractmethod
from enum   import Enum
from joblib import Parallel, delayed
from typing import Any, TYPE_CHECKING

from stacknet.store import Neuron

if TYPE_CHECKING:
    from stacknet.phenotype.network import Network

Extent = tuple[int, int, int]   # (width, height, depth)

class LayerType(Enum):
    """
    The layer variants a network can be composed of.
    """
    INPUT           = "input"
    FULLY_CONNECTED = "fully_connected"
    CONVOLUTION     = "convolution"
    POOLING         = "pooling"
    RELU            = "relu"
    SOFTMAX         = "softmax"

class Layer(ABC):
    """
    Abstract base class for all layers.

    A layer owns a list of units (Neuron objects) holding its outputs and the
    error signal accumulated on them during a backward pass. All layers but the
    input layer read from a source layer: the layer directly below them in
    the network.

    Layers with trainable parameters of their own (convolution) expose them via
    the parameter provider methods; layers whose parameters live in the network's
    NeuronSource (fully connected) or that have none, contribute nothing.

    Public Attributes:
        source: The layer this layer reads its inputs from (None for the input layer)
        units:  The units holding this layer's outputs and error signals

    Public Properties:
        network:           The Network this layer belongs to
        size:              Number of units (length of the output vector)
        output_extent:     (width, height, depth) of the output, or None if not spatial
        number_parameters: Number of trainable values owned by this layer

    Public Methods:
        evaluate_all_units():       Compute the outputs of all units (abstract)
        backpropagate(targets):     Backward step; 'targets' seeds the error for an output layer
        outputs():                  Current outputs as a numpy array
        deltas():                   Current accumulated error signals as a numpy array
        add_deltas(values):         Accumulate error signals on the units
        reset_deltas(num_jobs):     Clear the accumulated error signals
        get_parameters():           Trainable values in genome order
        set_parameters(values):     Overwrite trainable values in genome order
        blueprint():                Construction arguments for replaying this layer (abstract)
    """

    layer_type: LayerType

    def __init__(self, network: 'Network', source: 'Layer | None'):
        """
        Parameters:
            network: The Network this layer belongs to
            source:  The layer this layer reads its inputs from (None for the input layer)
        """
        self._network: 'Network'      = network
        self.source  : 'Layer | None' = source
        self.units   : list[Neuron]   = []

    @property
    def network(self) -> 'Network':
        """The Network this layer belongs to."""
        return self._network

    @property
    def size(self) -> int:
        """Number of units in this layer."""
        return len(self.units)

    @property
    def output_extent(self) -> Extent | None:
        """Spatial extent of the output, None for non-spatial layers."""
        return None

    def outputs(self) -> np.ndarray:
        """The current outputs of all units."""
        return np.array([unit.output for unit in self.units], dtype=np.float64)

    def deltas(self) -> np.ndarray:
        """The error signals currently accumulated on all units."""
        return np.array([unit.delta for unit in self.units], dtype=np.float64)

    def add_deltas(self, values) -> None:
        """
        Accumulate error signals on the units of this layer.

        Parameters:
            values: one value per unit, added to the unit's 'delta'
        """
        if len(values) != len(self.units):
            raise ValueError(f"Expected {len(self.units)} error values, got {len(values)}")
        for unit, value in zip(self.units, values):
            unit.delta += float(value)

    def _set_outputs(self, values) -> None:
        for unit, value in zip(self.units, values):
            unit.output = float(value)

    @abstractmethod
    def evaluate_all_units(self) -> None:
        """
        Compute the outputs of all units from the outputs of the source layer.
        """
        pass

    def backpropagate(self, targets=None) -> None:
        """
        Perform this layer's backward step.

        The output layer is called with the target vector: the error signal of
        each unit is then seeded from the network's loss derivative. Every other
        layer is called without targets, after all layers above it, and uses the
        error signal those layers have accumulated on its units.

        Parameters:
            targets: the expected outputs (only for the output layer)
        """
        if targets is not None:
            d_loss = self._network.d_loss
            self.add_deltas(np.atleast_1d(d_loss(np.asarray(targets, dtype=np.float64), self.outputs())))
        self._backpropagate()

    @abstractmethod
    def _backpropagate(self) -> None:
        """
        Use the accumulated error signal to update this layer's parameters and
        add the error signal of the source layer's units.
        """
        pass

    def _all_units(self) -> list[Neuron]:
        """Every unit whose error signal must be cleared after a backward pass."""
        return self.units

    def reset_deltas(self, num_jobs: int = 1) -> None:
        """
        Clear the error signal of every unit.

        Resetting one unit does not depend on any other, so with num_jobs != 1 the
        resets are spread over a pool of threads. The call returns only once every
        unit has been reset.

        Parameters:
            num_jobs: 1 = serial, >1 = number of threads, -1 = one per CPU core
        """
        units = self._all_units()
        if num_jobs == 1:
            for unit in units:
                unit.reset_delta()
        else:
            Parallel(n_jobs=num_jobs, prefer="threads")(delayed(unit.reset_delta)() for unit in units)

    @property
    def number_parameters(self) -> int:
        """Number of trainable values owned by this layer."""
        return 0

    def get_parameters(self) -> np.ndarray:
        """Trainable values owned by this layer, in genome order."""
        return np.empty(0, dtype=np.float64)

    def set_parameters(self, values) -> None:
        """Overwrite the trainable values owned by this layer, in genome order."""
        if len(values) != self.number_parameters:
            raise ValueError(f"Expected {self.number_parameters} parameters, got {len(values)}")

    @abstractmethod
    def blueprint(self) -> dict[str, Any]:
        """
        The keyword arguments that rebuild this layer through the matching
        'Network.add_..._layer()' method of another network.
        """
        pass

    def __repr__(self):
        extent = f", extent={self.output_extent}" if self.output_extent is not None else ""
        return f"{type(self).__name__}(size={self.size}{extent})"

def resolve_input_extent(source: Layer, input_extent: tuple[int, ...] | None) -> Extent:
    """
    Work out the (width, height, depth) of the data a spatial layer reads.

    Parameters:
        source:       the layer the spatial layer reads from
        input_extent: (width, height, depth), (width, height) meaning depth 1,
                      or None to use the source's own output extent

    Returns:
        (width, height, depth)

    Raises:
        ValueError: if no extent is given and the source is not spatial, or if the
                    extent's volume differs from the number of units of the source
    """
    if input_extent is None:
        input_extent = source.output_extent
        if input_extent is None:
            raise ValueError(f"An input extent is required to read from {source!r}")

    if len(input_extent) == 2:
        width, height, depth = input_extent[0], input_extent[1], 1
    elif len(input_extent) == 3:
        width, height, depth = input_extent
    else:
        raise ValueError(f"Input extent must be (width, height[, depth]), got {input_extent}")

    width, height, depth = int(width), int(height), int(depth)
    if min(width, height, depth) < 1:
        raise ValueError(f"Input extent must be positive, got {(width, height, depth)}")
    if width * height * depth != source.size:
        raise ValueError(f"Input extent {(width, height, depth)} does not match "
                         f"the {source.size} outputs of {source!r}")

    return width, height, depth
