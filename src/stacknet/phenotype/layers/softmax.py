"""
SoftMax Layer Module

Classes:
    SoftMaxLayer: Normalizes the outputs of its source into a probability distribution
"""

import numpy as np
from typing import Any, TYPE_CHECKING

from stacknet.phenotype.layers.base import Extent, Layer, LayerType
from stacknet.store                 import Neuron

if TYPE_CHECKING:
    from stacknet.phenotype.network import Network

class SoftMaxLayer(Layer):
    """
    Maps the outputs x of the source layer to exp(x) / sum(exp(x)).
    Keeps the spatial extent of its source, has no parameters.
    """

    layer_type = LayerType.SOFTMAX

    def __init__(self, source: Layer, network: 'Network'):
        super().__init__(network, source)
        self.units = [Neuron() for _ in range(source.size)]

    @property
    def output_extent(self) -> Extent | None:
        return self.source.output_extent

    def evaluate_all_units(self) -> None:
        inputs = self.source.outputs()
        exps   = np.exp(inputs - np.max(inputs))   # shifted for numerical stability
        self._set_outputs(exps / np.sum(exps))

    def _backpropagate(self) -> None:
        # Jacobian of softmax: diag(s) - s s^T
        probabilities = self.outputs()
        errors = self.deltas()
        self.source.add_deltas(probabilities * (errors - np.dot(errors, probabilities)))

    def blueprint(self) -> dict[str, Any]:
        return {}
