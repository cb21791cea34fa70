"""
Activation functions for the units of fully connected layers.

A unit stores the name of its activation function, not the function itself,
so networks stay picklable. The functions are written with autograd.numpy:
'activation_derivative()' differentiates them, so none needs a hand-written
derivative.
"""

import autograd.numpy as np  # type: ignore
from autograd import elementwise_grad  # type: ignore

# exp() overflows float64 a little above 709
_EXP_LIMIT = 500.0

def identity_activation(z):
    return z

def sigmoid_activation(z):
    return 1.0 / (1.0 + np.exp(-np.clip(z, -_EXP_LIMIT, _EXP_LIMIT)))

def tanh_activation(z):
    return np.tanh(z)

def relu_activation(z):
    return np.maximum(0.0, z)

def leaky_relu_activation(z):
    return np.where(z > 0.0, z, 0.01 * z)

def softplus_activation(z):
    # log(1 + e^z) = max(z, 0) + log(1 + e^-|z|)
    return np.maximum(z, 0.0) + np.log1p(np.exp(-np.abs(z)))

def clamped_activation(z):
    return np.clip(z, -1.0, 1.0)

def sin_activation(z):
    return np.sin(z)

def abs_activation(z):
    return np.abs(z)

activations = {
    "identity"  : identity_activation,
    "sigmoid"   : sigmoid_activation,
    "tanh"      : tanh_activation,
    "relu"      : relu_activation,
    "leaky_relu": leaky_relu_activation,
    "softplus"  : softplus_activation,
    "clamped"   : clamped_activation,
    "sin"       : sin_activation,
    "abs"       : abs_activation
    }

# Short codes used when printing units
activation_codes = {
    "identity"  : "IDN",
    "sigmoid"   : "SIG",
    "tanh"      : "TNH",
    "relu"      : "RLU",
    "leaky_relu": "LRU",
    "softplus"  : "SPL",
    "clamped"   : "CLP",
    "sin"       : "SIN",
    "abs"       : "ABS"
    }

def activation_derivative(name: str, z):
    """
    Derivative of the named activation function, evaluated at 'z'.
    Works for scalars and arrays.
    """
    if name not in activations:
        raise ValueError(f"Unknown activation function '{name}'")
    return elementwise_grad(activations[name])(np.asarray(z, dtype=np.float64))
