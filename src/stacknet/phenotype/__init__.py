"""
Phenotype Package

This package implements the executable network: its layers, the stack that
orders them, and the Network class driving forward passes, backward passes
and the genome.

Modules:
    layers:      Layer variants (input, fully connected, convolution, pooling, ReLU, softmax)
    layer_stack: LayerStack class
    statistics:  TrainingStatistics and TrainingStep classes
    network:     Network class

Exported Classes:
    Network:            A linear stack of layers with a loss function and a learning rate
    LayerStack:         Ordered container of layers with explicit traversal directions
    LayerType:          Enumeration of the layer variants
    TrainingStatistics: Cumulative and sliding-window training error
    TrainingStep:       Snapshot of the training statistics after one example
"""

from stacknet.phenotype.layers      import LayerType
from stacknet.phenotype.layer_stack import LayerStack
from stacknet.phenotype.network     import Network
from stacknet.phenotype.statistics  import TrainingStatistics, TrainingStep

__all__ = ['LayerStack',
           'LayerType',
           'Network',
           'TrainingStatistics',
           'TrainingStep']
