"""
Activations Package

This package provides activation functions for the units of fully connected layers.

Exported:
    activations:           Dictionary mapping activation function names to functions
    activation_codes:      Dictionary mapping activation function names to 3-letter codes
    activation_derivative: Derivative of a named activation function (via autograd)
    Individual activation functions: identity_activation, sigmoid_activation,
                                     tanh_activation, relu_activation, leaky_relu_activation,
                                     softplus_activation, clamped_activation, sin_activation,
                                     abs_activation
"""

from stacknet.activations.basic_activations import (
    activations,
    activation_codes,
    activation_derivative,
    identity_activation,
    sigmoid_activation,
    tanh_activation,
    relu_activation,
    leaky_relu_activation,
    softplus_activation,
    clamped_activation,
    sin_activation,
    abs_activation
)

__all__ = [
    'activations',
    'activation_codes',
    'activation_derivative',
    'identity_activation',
    'sigmoid_activation',
    'tanh_activation',
    'relu_activation',
    'leaky_relu_activation',
    'softplus_activation',
    'clamped_activation',
    'sin_activation',
    'abs_activation'
]
