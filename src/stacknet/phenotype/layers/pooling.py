"""
Pooling Layer Module

Classes:
    PoolingLayer: A spatial layer reducing each window of its input to its maximum
"""

import numpy as np
from typing import Any, TYPE_CHECKING

from stacknet.phenotype.layers.base import Extent, Layer, LayerType, resolve_input_extent
from stacknet.store                 import Neuron

if TYPE_CHECKING:
    from stacknet.phenotype.network import Network

class PoolingLayer(Layer):
    """
    A max-pooling layer.

    The input volume is tessellated, channel by channel, into non-overlapping
    square windows of 'tessellation' x 'tessellation' values; each window is
    reduced to its maximum. Rows and columns that do not fill a whole window
    are ignored. The layer has no trainable parameters; its backward step
    routes the error signal of each output to the input that won its window.

    Public Properties:
        tessellation: Width and height of the pooling windows
        input_extent: (width, height, depth) of the input
    """

    layer_type = LayerType.POOLING

    def __init__(self,
                 source      : Layer,
                 tessellation: int,
                 network     : 'Network',
                 input_extent: tuple[int, ...] | None = None):
        """
        Parameters:
            source:       The layer to read from
            tessellation: Width and height of the pooling windows
            network:      The Network this layer belongs to
            input_extent: (width, height) or (width, height, depth) of the input;
                          None uses the source's extent
        """
        super().__init__(network, source)

        if tessellation < 1:
            raise ValueError(f"Tessellation must be positive, got {tessellation}")

        self._tessellation: int = tessellation
        self._input_width, self._input_height, self._input_depth = resolve_input_extent(source, input_extent)
        self._output_width  = self._input_width  // tessellation
        self._output_height = self._input_height // tessellation
        if self._output_width == 0 or self._output_height == 0:
            raise ValueError(f"Tessellation {tessellation} is larger than the input extent {self.input_extent}")

        self.units = [Neuron() for _ in range(self._input_depth * self._output_height * self._output_width)]
        self._winners: np.ndarray | None = None   # index of the maximum inside each window

    @property
    def tessellation(self) -> int:
        return self._tessellation

    @property
    def input_extent(self) -> Extent:
        return self._input_width, self._input_height, self._input_depth

    @property
    def output_extent(self) -> Extent:
        return self._output_width, self._output_height, self._input_depth

    def _read_windows(self) -> np.ndarray:
        """The input as an array of shape (depth, output_height, output_width, t*t)."""
        t = self._tessellation
        d, oh, ow = self._input_depth, self._output_height, self._output_width
        volume = self.source.outputs().reshape(d, self._input_height, self._input_width)
        volume = volume[:, :oh * t, :ow * t].reshape(d, oh, t, ow, t)
        return volume.transpose(0, 1, 3, 2, 4).reshape(d, oh, ow, t * t)

    def evaluate_all_units(self) -> None:
        windows = self._read_windows()
        self._winners = windows.argmax(axis=-1)
        self._set_outputs(windows.max(axis=-1).ravel())

    def _backpropagate(self) -> None:
        if self._winners is None:
            self._winners = self._read_windows().argmax(axis=-1)

        t = self._tessellation
        errors  = self.deltas().reshape(self._input_depth, self._output_height, self._output_width)
        d_input = np.zeros((self._input_depth, self._input_height, self._input_width))

        channel, row, col = np.indices(errors.shape)
        np.add.at(d_input,
                  (channel, row * t + self._winners // t, col * t + self._winners % t),
                  errors)
        self.source.add_deltas(d_input.ravel())

    def blueprint(self) -> dict[str, Any]:
        return {"tessellation": self._tessellation, "input_extent": self.input_extent}

    def __repr__(self):
        return (f"PoolingLayer(tessellation={self._tessellation}, "
                f"input_extent={self.input_extent}, output_extent={self.output_extent})")
