"""
Fully Connected Layer Module

Classes:
    FullyConnectedLayer: A layer whose every unit is connected to every unit of its source
"""

import numpy as np
from typing import Any, TYPE_CHECKING

from stacknet.activations           import activation_derivative
from stacknet.phenotype.layers.base import Layer, LayerType

if TYPE_CHECKING:
    from stacknet.phenotype.network import Network
    from stacknet.store             import Neuron

class FullyConnectedLayer(Layer):
    """
    A layer in which every unit receives an edge from every unit of the source
    layer, plus one edge from a bias unit that always outputs 1.0.

    The units, the bias unit and all edges are generated by the network's
    NeuronSource, so the weights of this layer are part of the leading (edge)
    section of the genome and the layer itself reports no parameters.
    Edges are generated unit by unit: first one edge per source unit, in the
    order of the source's units, then the bias edge.

    Each unit computes:  activation(sum(weight * source output) + bias weight)

    Public Attributes:
        scaling: Whether initial weights are scaled by 1/sqrt(fan_in)

    Public Properties:
        activation_name: Name of the activation function shared by all units
    """

    layer_type = LayerType.FULLY_CONNECTED

    def __init__(self,
                 size      : int,
                 source    : Layer,
                 network   : 'Network',
                 activation: str  = "sigmoid",
                 scale     : bool = True):
        """
        Parameters:
            size:       Number of units
            source:     The layer to draw edges from
            network:    The Network this layer belongs to
            activation: Name of the activation function (see 'stacknet.activations')
            scale:      If True, initial weights are drawn from N(0, 1/fan_in);
                        otherwise from the network's weight initialization distribution
        """
        super().__init__(network, source)

        if size < 1:
            raise ValueError(f"Fully connected layer size must be positive, got {size}")

        store = network.neuron_source
        self._activation_name: str  = activation
        self.scaling         : bool = scale

        self.units = [store.generate_neuron(activation) for _ in range(size)]
        self._bias_unit: 'Neuron' = store.generate_neuron(constant=1.0)

        fan_in = source.size + 1
        for unit in self.units:
            for source_unit in source.units:
                store.generate_edge(source_unit, unit, self._initial_weight(fan_in))
            store.generate_edge(self._bias_unit, unit, self._initial_weight(fan_in))

    def _initial_weight(self, fan_in: int) -> float:
        if self.scaling:
            return np.random.normal(0.0, 1.0 / np.sqrt(fan_in))
        return np.random.normal(self._network.weight_init_mean, self._network.weight_init_stdev)

    @property
    def activation_name(self) -> str:
        """Name of the activation function shared by all units."""
        return self._activation_name

    def evaluate_all_units(self) -> None:
        for unit in self.units:
            unit.calculate_output()

    def _backpropagate(self) -> None:
        learning_rate = self._network.learning_rate

        for unit in self.units:
            # error signal at the unit's weighted input
            dz = unit.delta * float(activation_derivative(self._activation_name, unit.weighted_input))
            if dz == 0.0:
                continue

            for edge in unit.incoming:
                edge.source.delta += dz * edge.weight
                edge.weight       -= learning_rate * dz * edge.source.output

    def _all_units(self) -> list['Neuron']:
        return self.units + [self._bias_unit]

    def blueprint(self) -> dict[str, Any]:
        return {"size": self.size, "activation": self._activation_name, "scale": self.scaling}

    def __repr__(self):
        return f"FullyConnectedLayer(size={self.size}, activation={self._activation_name}, scale={self.scaling})"
