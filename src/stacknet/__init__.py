"""
stacknet - a trainable layered neural network engine.

Networks are linear stacks of layers (input, fully connected, convolution,
pooling, ReLU, softmax) that can be trained two ways over the same parameters:
by backpropagation, and by evolution of their flattened parameter vector
(the genome) through crossover and mutation.

Main components:
- store:       Parameter store (neurons and weighted edges)
- phenotype:   Layers and the Network orchestrating them
- losses:      Loss functions and their derivatives
- genotype:    Crossover and mutation over genomes
- activations: Activation functions for fully connected layers
- run:         Configuration, progress reporting and evolutionary trials

Example:
    from stacknet import Network

    network = Network("error_squared", learning_rate=0.1)
    network.add_input_layer(2)
    network.add_fully_connected_layer(1)
    outputs = network.forward_pass([0.5, -0.5])
    error   = network.backpropagate([1.0])
"""

import logging

__version__ = "0.1.0"

from stacknet.losses    import LossFunctionType
from stacknet.phenotype import LayerType, Network
from stacknet.genotype  import crossover, mutate
from stacknet.run       import Config, ConsoleReporter, HistoryRecorder, ProgressObserver, Trial, TrialGrad

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Config",
    "ConsoleReporter",
    "HistoryRecorder",
    "LayerType",
    "LossFunctionType",
    "Network",
    "ProgressObserver",
    "Trial",
    "TrialGrad",
    "crossover",
    "mutate",
]
