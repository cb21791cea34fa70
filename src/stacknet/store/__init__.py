"""
Parameter Store Package

This package implements the graph of neurons and weighted edges that the fully
connected layers of a network read from and write to.

Modules:
    neuron:        Neuron class
    edge:          Edge class
    neuron_source: NeuronSource class

Exported Classes:
    Neuron:       A computational unit with an output and an accumulated error signal
    Edge:         A weighted directed connection between two neurons
    NeuronSource: Generator and registry of a network's neurons and edges
"""

from stacknet.store.edge          import Edge
from stacknet.store.neuron        import Neuron
from stacknet.store.neuron_source import NeuronSource

__all__ = ['Edge',
           'Neuron',
           'NeuronSource']
