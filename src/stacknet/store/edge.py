"""
Edge Module

This module implements the Edge class, a weighted connection between two neurons.

Classes:
    Edge: A weighted directed connection between two units of the parameter store
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from stacknet.store.neuron import Neuron

class Edge:
    """
    A weighted directed connection between two neurons.

    Edges are generated by a NeuronSource, which numbers them in generation
    order. That order is the order in which edge weights appear in a network's
    genome, so it must never change once the edge exists.

    Public Attributes:
        id:     Generation index of this edge within its NeuronSource
        source: The neuron the signal comes from
        target: The neuron the signal goes to
        weight: Weight multiplier applied to the transmitted signal
    """

    def __init__(self, edge_id: int, source: 'Neuron', target: 'Neuron', weight: float):
        """
        Parameters:
            edge_id: Generation index of this edge
            source:  The neuron the signal comes from
            target:  The neuron the signal goes to
            weight:  Initial weight of the edge
        """
        self.id    : int      = edge_id
        self.source: 'Neuron' = source
        self.target: 'Neuron' = target
        self.weight: float    = weight

    def __repr__(self):
        return (f"Edge(edge_id={self.id:03d}, source={self.source.id}, "
                f"target={self.target.id}, weight={self.weight:+.6f})")

    def __str__(self):
        return f"[{self.id:03d},{self.source.id}=>{self.target.id},{self.weight:+.02f}]"
