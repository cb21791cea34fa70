"""
Neuron Module

This module implements the Neuron class, the computation unit shared by all layers.

Classes:
    Neuron: A computational unit holding an output value and an accumulated error signal
"""

from typing import Callable, Optional, TYPE_CHECKING

from stacknet.activations import activations, activation_codes

if TYPE_CHECKING:
    from stacknet.store.edge import Edge

class Neuron:
    """
    A computational unit (neuron) in a network.

    Units that belong to fully connected layers (and to the input layer) are
    generated by a NeuronSource, which gives them a stable integer ID and lets
    edges connect them. Units private to spatial or transformation layers are
    created directly and have no ID; those layers set their output explicitly.

    A unit with an activation function computes its output as:
        activation(sum(edge.weight * edge.source.output for each incoming edge))

    A constant unit (used to feed biases) always outputs the same value.

    Public Attributes:
        id:             Stable identifier (None for units outside the store)
        output:         The most recently computed output value
        weighted_input: The most recently computed weighted input (pre-activation)
        delta:          Accumulated error signal d(loss)/d(output) for the current step
        incoming:       Edges ending at this unit, in generation order

    Public Properties:
        activation_name: Name of the activation function (None for pass-through units)
        activation:      The activation function itself (callable or None)
        constant:        Whether the unit always outputs a fixed value

    Public Methods:
        calculate_output(): Compute and store the unit's output from its incoming edges
        reset_delta():      Clear the accumulated error signal
    """

    def __init__(self,
                 neuron_id      : int | None = None,
                 activation_name: str | None = None,
                 constant       : float | None = None):
        """
        Parameters:
            neuron_id:       Stable identifier assigned by a NeuronSource (None if unregistered)
            activation_name: Name of the activation function (see 'stacknet.activations')
                             None for units whose output is set from outside
            constant:        If given, the unit always outputs this value
        """
        if activation_name is not None and activation_name not in activations:
            raise ValueError(f"Unknown activation function '{activation_name}'")

        self.id              : int | None   = neuron_id
        self._activation_name: str | None   = activation_name
        self._constant       : float | None = constant
        self.output          : float        = 0.0 if constant is None else constant
        self.weighted_input  : float        = 0.0
        self.delta           : float        = 0.0
        self.incoming        : list['Edge'] = []

    @property
    def activation_name(self) -> Optional[str]:
        """The name of the activation function."""
        return self._activation_name

    @property
    def activation(self) -> Optional[Callable[[float], float]]:
        """The activation function (looked up by name, so neurons stay picklable)."""
        if self._activation_name is None:
            return None
        return activations[self._activation_name]

    @property
    def constant(self) -> bool:
        """Whether this unit always outputs the same value."""
        return self._constant is not None

    def calculate_output(self) -> None:
        """
        Calculate the output of this unit from its incoming edges.
        The result is saved internally in 'self.output'.
        """
        if self._constant is not None:
            self.output = self._constant
            return

        if self.activation is None:
            raise ValueError(f"Neuron {self.id} has no activation function")

        self.weighted_input = sum(e.weight * e.source.output for e in self.incoming)
        self.output = float(self.activation(self.weighted_input))

    def reset_delta(self) -> None:
        """Clear the error signal accumulated during the last backward pass."""
        self.delta = 0.0

    def __repr__(self):
        return (f"Neuron(neuron_id={self.id}, activation={self._activation_name}, "
                f"output={self.output}, delta={self.delta})")

    def __str__(self):
        if self._constant is not None:
            return f"[{self.id},CST={self._constant:.2f}]"
        if self._activation_name is None:
            return f"[{self.id}]"
        act_code = activation_codes.get(self._activation_name, "???")
        return f"[{self.id},{act_code},out={self.output:.2f}]"
