"""
Input Layer Module

Classes:
    InputLayer: The bottom layer of a network, holding the injected input vector
"""

import numpy as np
from typing import Any, TYPE_CHECKING

from stacknet.phenotype.layers.base import Extent, Layer, LayerType

if TYPE_CHECKING:
    from stacknet.phenotype.network import Network

class InputLayer(Layer):
    """
    The layer through which a network receives its inputs.

    Its units are registered in the network's NeuronSource so that fully
    connected layers can draw edges from them. It has no parameters and its
    backward step does nothing.

    Public Methods:
        add_input(inputs): Inject an input vector (one value per unit)
    """

    layer_type = LayerType.INPUT

    def __init__(self, size: int, network: 'Network', extent: Extent | None = None):
        """
        Parameters:
            size:    Number of input units
            network: The Network this layer belongs to
            extent:  Optional (width, height, depth) of the input, for networks
                     whose next layer is a convolution or pooling layer
        """
        super().__init__(network, None)

        if size < 1:
            raise ValueError(f"Input layer size must be positive, got {size}")
        if extent is not None:
            extent = tuple(int(n) for n in extent)
            if len(extent) != 3 or extent[0] * extent[1] * extent[2] != size:
                raise ValueError(f"Extent {extent} does not describe {size} inputs")

        self._extent: Extent | None = extent
        self.units = [network.neuron_source.generate_neuron() for _ in range(size)]
        self._last_input: np.ndarray | None = None

    @property
    def last_input(self) -> np.ndarray | None:
        """The most recently injected input vector (None before the first one)."""
        return None if self._last_input is None else self._last_input.copy()

    @property
    def output_extent(self) -> Extent | None:
        return self._extent

    def add_input(self, inputs) -> None:
        """
        Inject an input vector.

        Raises:
            ValueError: if the number of inputs differs from the number of units
        """
        if len(inputs) != len(self.units):
            raise ValueError(f"Expected {len(self.units)} inputs, got {len(inputs)}")
        self._set_outputs(inputs)
        self._last_input = np.array(inputs, dtype=np.float64)

    def evaluate_all_units(self) -> None:
        # the units already hold the injected input
        pass

    def _backpropagate(self) -> None:
        pass

    def blueprint(self) -> dict[str, Any]:
        return {"size": self.size, "extent": self._extent}
