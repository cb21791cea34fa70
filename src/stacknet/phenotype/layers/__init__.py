"""
Layers Package

This package implements the layer variants a network is composed of.

Modules:
    base:            LayerType enumeration and Layer abstract base class
    input:           InputLayer class
    fully_connected: FullyConnectedLayer class
    convolution:     ConvolutionLayer class
    pooling:         PoolingLayer class
    relu:            ReLULayer class
    softmax:         SoftMaxLayer class
"""

from stacknet.phenotype.layers.base            import Layer, LayerType, resolve_input_extent
from stacknet.phenotype.layers.convolution     import ConvolutionLayer
from stacknet.phenotype.layers.fully_connected import FullyConnectedLayer
from stacknet.phenotype.layers.input           import InputLayer
from stacknet.phenotype.layers.pooling         import PoolingLayer
from stacknet.phenotype.layers.relu            import ReLULayer
from stacknet.phenotype.layers.softmax         import SoftMaxLayer

__all__ = ['ConvolutionLayer',
           'FullyConnectedLayer',
           'InputLayer',
           'Layer',
           'LayerType',
           'PoolingLayer',
           'ReLULayer',
           'SoftMaxLayer',
           'resolve_input_extent']
