"""
Loss Functions Module

Each loss comes as a pair: the loss itself, loss(target, result), and its
derivative with respect to the network output, d_loss(target, result).
All functions are written with autograd.numpy and accept scalars or arrays.

The derivatives of 'logistic_loss', 'exponential_loss' and 'cross_entropy_loss',
and the derivative of 'hinge' where target*result <= 0, are reproduced exactly
as the network has always used them; they do not match the analytic derivative
of the corresponding loss (see 'consistent_derivative()').

Classes:
    LossFunctionType: Enumeration of the supported loss functions
"""

import autograd.numpy as np  # type: ignore
from enum   import Enum
from typing import Callable

LossFunction = Callable[[float, float], float]

class LossFunctionType(Enum):
    """
    The loss functions a Network can be built with.
    """
    ERROR_SQUARED              = "error_squared"
    LOGISTICAL                 = "logistical"
    HINGE                      = "hinge"
    SQUARE_LOSS_CLASSIFICATION = "square_loss_classification"
    LOGISTIC_LOSS              = "logistic_loss"
    EXPONENTIAL_LOSS           = "exponential_loss"
    CROSS_ENTROPY_LOSS         = "cross_entropy_loss"

_LN2 = np.log(2.0)

def error_squared_loss(target, result):
    return 0.5 * (target - result) ** 2

def error_squared_d_loss(target, result):
    return result - target

def logistical_loss(target, result):
    return -target * np.log(result)

def logistical_d_loss(target, result):
    return -target / result

def hinge_loss(target, result):
    margin = target * result
    return np.where(margin <= 0, 0.5 - margin,
                    np.where(margin > 1, 0.0, 0.5 * (1 - margin) * (1 - margin)))

def hinge_d_loss(target, result):
    margin = target * result
    return np.where(margin <= 0, -result,
                    np.where(margin > 1, 0.0, -target * (1 - margin)))

def square_loss_classification_loss(target, result):
    return (1 - result * target) ** 2

def square_loss_classification_d_loss(target, result):
    return -2 * target * (1 - target * result)

def logistic_loss(target, result):
    return (1 / _LN2) * np.log(1 + np.exp(-target * result))

def logistic_d_loss(target, result):
    return (result * np.exp(result * target)) / (_LN2 * np.exp(target * result) + _LN2)

def exponential_loss(target, result):
    return np.exp(-target * result)

def exponential_d_loss(target, result):
    return -result * np.exp(-result * target)

def cross_entropy_loss(target, result):
    # the label is derived from the result; 'target' does not take part
    t = (1 + result) / 2
    return -t * np.log(result) - (1 - t) * np.log(1 - result)

def cross_entropy_d_loss(target, result):
    t = (1 + result) / 2
    return -((t - result) / ((1 - result) * result))

losses: dict[LossFunctionType, tuple[LossFunction, LossFunction]] = {
    LossFunctionType.ERROR_SQUARED             : (error_squared_loss,              error_squared_d_loss),
    LossFunctionType.LOGISTICAL                : (logistical_loss,                 logistical_d_loss),
    LossFunctionType.HINGE                     : (hinge_loss,                      hinge_d_loss),
    LossFunctionType.SQUARE_LOSS_CLASSIFICATION: (square_loss_classification_loss, square_loss_classification_d_loss),
    LossFunctionType.LOGISTIC_LOSS             : (logistic_loss,                   logistic_d_loss),
    LossFunctionType.EXPONENTIAL_LOSS          : (exponential_loss,                exponential_d_loss),
    LossFunctionType.CROSS_ENTROPY_LOSS        : (cross_entropy_loss,              cross_entropy_d_loss),
    }

# Pairs whose 'd_loss' is the true derivative of 'loss' over the whole domain
_CONSISTENT = frozenset({LossFunctionType.ERROR_SQUARED,
                         LossFunctionType.LOGISTICAL,
                         LossFunctionType.SQUARE_LOSS_CLASSIFICATION})

def resolve_loss_function_type(selector: LossFunctionType | str) -> LossFunctionType:
    """
    Turn a loss function selector into a LossFunctionType.

    Parameters:
        selector: a LossFunctionType, or the name/value of one (case insensitive),
                  e.g. "error_squared", "ERROR_SQUARED", "ErrorSquared"

    Returns:
        the matching LossFunctionType
    """
    if isinstance(selector, LossFunctionType):
        return selector

    if isinstance(selector, str):
        key = selector.strip().replace("-", "_").replace(" ", "_")
        for lft in LossFunctionType:
            if key.lower() in (lft.value, lft.name.lower(), lft.value.replace("_", "")):
                return lft

    raise ValueError(f"Unsupported loss function: {selector!r}")

def get_loss_functions(selector: LossFunctionType | str) -> tuple[LossFunction, LossFunction]:
    """
    Get the (loss, d_loss) pair for a loss function selector.

    Raises:
        ValueError: if the selector does not name a supported loss function
    """
    return losses[resolve_loss_function_type(selector)]

def consistent_derivative(selector: LossFunctionType | str) -> bool:
    """
    Whether 'd_loss' is the analytic derivative of 'loss' for this selector.
    Hinge is consistent only where target*result > 0.
    """
    return resolve_loss_function_type(selector) in _CONSISTENT
