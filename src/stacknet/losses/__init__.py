"""
Losses Package

This package provides the loss function family used to train networks.

Exported:
    LossFunctionType:           Enumeration of the supported loss functions
    losses:                     Dictionary mapping LossFunctionType to (loss, d_loss)
    get_loss_functions:         Get the (loss, d_loss) pair for a selector
    resolve_loss_function_type: Turn a name or enum member into a LossFunctionType
    consistent_derivative:      Whether d_loss is the analytic derivative of loss
"""

from stacknet.losses.basic_losses import (
    LossFunctionType,
    losses,
    get_loss_functions,
    resolve_loss_function_type,
    consistent_derivative
)

__all__ = [
    'LossFunctionType',
    'losses',
    'get_loss_functions',
    'resolve_loss_function_type',
    'consistent_derivative'
]
