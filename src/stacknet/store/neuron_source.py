"""
Neuron Source Module

This module implements the NeuronSource class, the parameter store shared by
the fully connected layers of a network.

Classes:
    NeuronSource: Generator and registry of neurons and weighted edges
"""

import numpy as np
from itertools import count

from stacknet.store.edge   import Edge
from stacknet.store.neuron import Neuron

class NeuronSource:
    """
    Generates and keeps track of the neurons and edges of one network.

    Each neuron gets a stable ID, each edge a generation index. Edges are
    kept in generation order: that order defines the leading part of the
    network's genome, so 'get_parameters()' and 'set_parameters()' walk
    the edges in exactly that order.

    Unlike a global tracker, each network owns its own source, so a network
    and its copy never share neurons, edges or counters.

    Public Attributes:
        neurons: Map from neuron ID to Neuron, in generation order
        edges:   All edges, in generation order

    Public Properties:
        number_parameters: Number of trainable values held (one per edge)

    Public Methods:
        generate_neuron(activation_name, constant): Create and register a new neuron
        generate_edge(source, target, weight):     Create and register a new edge
        find_neuron(neuron_id):                    Look up a neuron by its ID
        get_parameters():                          Edge weights, in generation order
        set_parameters(values):                    Overwrite edge weights, in generation order
    """

    def __init__(self):
        self._next_neuron_id = count(0)
        self._next_edge_id   = count(0)
        self.neurons: dict[int, Neuron] = {}
        self.edges  : list[Edge]        = []

    def generate_neuron(self,
                        activation_name: str | None = None,
                        constant       : float | None = None) -> Neuron:
        """
        Create a new neuron with a fresh ID and register it.

        Parameters:
            activation_name: Name of the activation function (None for input units)
            constant:        If given, the neuron always outputs this value

        Returns:
            the new Neuron
        """
        neuron = Neuron(next(self._next_neuron_id), activation_name, constant)
        self.neurons[neuron.id] = neuron
        return neuron

    def generate_edge(self, source: Neuron, target: Neuron, weight: float) -> Edge:
        """
        Create a new edge from 'source' to 'target' and register it.
        The edge is also appended to the target's list of incoming edges.

        Parameters:
            source: The neuron the signal comes from
            target: The neuron the signal goes to
            weight: Initial weight of the edge

        Returns:
            the new Edge
        """
        edge = Edge(next(self._next_edge_id), source, target, float(weight))
        self.edges.append(edge)
        target.incoming.append(edge)
        return edge

    def find_neuron(self, neuron_id: int) -> Neuron:
        """
        Look up a neuron by its ID.

        Raises:
            KeyError: if no neuron with this ID was generated by this source
        """
        try:
            return self.neurons[neuron_id]
        except KeyError:
            raise KeyError(f"No neuron with ID {neuron_id}") from None

    @property
    def number_parameters(self) -> int:
        """Number of trainable values held by the store (one weight per edge)."""
        return len(self.edges)

    def get_parameters(self) -> np.ndarray:
        """All edge weights, in generation order."""
        return np.array([edge.weight for edge in self.edges], dtype=np.float64)

    def set_parameters(self, values) -> None:
        """
        Overwrite all edge weights, in generation order.

        Raises:
            ValueError: if the number of values differs from the number of edges
                        (nothing is written in that case)
        """
        if len(values) != len(self.edges):
            raise ValueError(f"Expected {len(self.edges)} edge weights, got {len(values)}")

        for edge, value in zip(self.edges, values):
            edge.weight = float(value)

    def __repr__(self):
        return f"NeuronSource(neurons={len(self.neurons)}, edges={len(self.edges)})"
