"""
ReLU Layer Module

Classes:
    ReLULayer: An element-wise max(0, x) transformation layer
"""

import numpy as np
from typing import Any, TYPE_CHECKING

from stacknet.phenotype.layers.base import Extent, Layer, LayerType
from stacknet.store                 import Neuron

if TYPE_CHECKING:
    from stacknet.phenotype.network import Network

class ReLULayer(Layer):
    """
    Applies max(0, x) to every output of the source layer.
    Keeps the spatial extent of its source, has no parameters.
    """

    layer_type = LayerType.RELU

    def __init__(self, source: Layer, network: 'Network'):
        super().__init__(network, source)
        self.units = [Neuron() for _ in range(source.size)]
        self._inputs: np.ndarray | None = None

    @property
    def output_extent(self) -> Extent | None:
        return self.source.output_extent

    def evaluate_all_units(self) -> None:
        self._inputs = self.source.outputs()
        self._set_outputs(np.maximum(0.0, self._inputs))

    def _backpropagate(self) -> None:
        inputs = self._inputs if self._inputs is not None else self.source.outputs()
        self.source.add_deltas(self.deltas() * (inputs > 0.0))

    def blueprint(self) -> dict[str, Any]:
        return {}
