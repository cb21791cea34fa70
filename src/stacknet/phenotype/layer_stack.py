"""
Layer Stack Module

Classes:
    LayerStack: Ordered container of a network's layers with explicit traversal directions
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from stacknet.phenotype.layers import Layer

class LayerStack:
    """
    The layers of a network, in the order they were pushed.

    The input layer is pushed first and sits at the bottom; the most recently
    pushed layer sits on top and is the output layer. The stack is deliberately
    not iterable: callers pick a direction.
        forward_order():  bottom to top (input -> output), for the forward pass
        backward_order(): top to bottom (output -> input), for the backward pass

    Public Properties:
        top:    The most recently pushed layer (the output layer)
        bottom: The first pushed layer (the input layer)

    Public Methods:
        push(layer):      Put a layer on top of the stack
        forward_order():  Layers from input to output
        backward_order(): Layers from output to input
    """

    def __init__(self):
        self._layers: list['Layer'] = []

    def push(self, layer: 'Layer') -> None:
        self._layers.append(layer)

    @property
    def top(self) -> 'Layer':
        if not self._layers:
            raise IndexError("The layer stack is empty")
        return self._layers[-1]

    @property
    def bottom(self) -> 'Layer':
        if not self._layers:
            raise IndexError("The layer stack is empty")
        return self._layers[0]

    def forward_order(self) -> list['Layer']:
        """Layers from the input layer up to the output layer."""
        return list(self._layers)

    def backward_order(self) -> list['Layer']:
        """Layers from the output layer down to the input layer."""
        return self._layers[::-1]

    def __len__(self):
        return len(self._layers)

    def __repr__(self):
        return f"LayerStack({', '.join(type(layer).__name__ for layer in self._layers)})"
