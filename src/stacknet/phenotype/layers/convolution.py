"""
Convolution Layer Module

Classes:
    ConvolutionLayer: A spatial layer sliding a bank of learnable filters over its input
"""

import numpy as np
from typing import Any, TYPE_CHECKING

from stacknet.phenotype.layers.base import Extent, Layer, LayerType, resolve_input_extent
from stacknet.store                 import Neuron

if TYPE_CHECKING:
    from stacknet.phenotype.network import Network

class ConvolutionLayer(Layer):
    """
    A convolution layer.

    The input is read as a volume of (width, height, depth), laid out depth-major:
    the value at column x, row y, channel d sits at index d*height*width + y*width + x.
    The output uses the same layout, with one channel per filter.

    Filters and biases belong to the layer itself and are not part of the
    network's NeuronSource. In the genome they appear as: every filter in
    turn, each walked by depth, then row, then column; followed by the biases.

    Public Attributes:
        filters: One (depth, filter_size, filter_size) array per filter
        biases:  One bias per filter

    Public Properties:
        n_filters, filter_size, stride, padding: Layer hyperparameters
        input_extent:                            (width, height, depth) of the input
    """

    layer_type = LayerType.CONVOLUTION

    def __init__(self,
                 source      : Layer,
                 n_filters   : int,
                 filter_size : int,
                 stride      : int,
                 padding     : int,
                 network     : 'Network',
                 input_extent: tuple[int, ...] | None = None):
        """
        Parameters:
            source:       The layer to read from
            n_filters:    Number of filters (depth of the output)
            filter_size:  Width and height of each filter
            stride:       Step between two filter positions
            padding:      Number of zeros added around each side of the input
            network:      The Network this layer belongs to
            input_extent: (width, height, depth) of the input; None uses the source's extent
        """
        super().__init__(network, source)

        if n_filters < 1 or filter_size < 1 or stride < 1 or padding < 0:
            raise ValueError(f"Bad convolution hyperparameters: n_filters={n_filters}, "
                             f"filter_size={filter_size}, stride={stride}, padding={padding}")

        self._n_filters  : int = n_filters
        self._filter_size: int = filter_size
        self._stride     : int = stride
        self._padding    : int = padding

        self._input_width, self._input_height, self._input_depth = resolve_input_extent(source, input_extent)
        self._output_width  = self._output_length(self._input_width)
        self._output_height = self._output_length(self._input_height)

        fan_in = self._input_depth * filter_size * filter_size
        shape  = (self._input_depth, filter_size, filter_size)
        self.filters: list[np.ndarray] = [np.random.normal(0.0, 1.0 / np.sqrt(fan_in), shape)
                                          for _ in range(n_filters)]
        self.biases : np.ndarray       = np.random.normal(0.0, 1.0 / np.sqrt(fan_in), n_filters)

        self.units = [Neuron() for _ in range(n_filters * self._output_height * self._output_width)]
        self._padded_input: np.ndarray | None = None

    def _output_length(self, input_length: int) -> int:
        span = input_length - self._filter_size + 2 * self._padding
        if span < 0 or span % self._stride != 0:
            raise ValueError(f"Filter size {self._filter_size}, stride {self._stride} and padding "
                             f"{self._padding} do not tile an input of length {input_length}")
        return span // self._stride + 1

    @property
    def n_filters(self) -> int:
        return self._n_filters

    @property
    def filter_size(self) -> int:
        return self._filter_size

    @property
    def stride(self) -> int:
        return self._stride

    @property
    def padding(self) -> int:
        return self._padding

    @property
    def input_extent(self) -> Extent:
        return self._input_width, self._input_height, self._input_depth

    @property
    def output_extent(self) -> Extent:
        return self._output_width, self._output_height, self._n_filters

    def _read_padded_input(self) -> np.ndarray:
        volume = self.source.outputs().reshape(self._input_depth, self._input_height, self._input_width)
        p = self._padding
        return np.pad(volume, ((0, 0), (p, p), (p, p)))

    def _windows(self):
        """Yield (row, column, row slice, column slice) for every filter position."""
        f, s = self._filter_size, self._stride
        for i in range(self._output_height):
            for j in range(self._output_width):
                yield i, j, slice(i * s, i * s + f), slice(j * s, j * s + f)

    def evaluate_all_units(self) -> None:
        padded = self._read_padded_input()
        result = np.empty((self._n_filters, self._output_height, self._output_width))

        for k, kernel in enumerate(self.filters):
            for i, j, rows, cols in self._windows():
                result[k, i, j] = np.sum(kernel * padded[:, rows, cols]) + self.biases[k]

        self._padded_input = padded
        self._set_outputs(result.ravel())

    def _backpropagate(self) -> None:
        padded = self._padded_input if self._padded_input is not None else self._read_padded_input()
        errors = self.deltas().reshape(self._n_filters, self._output_height, self._output_width)

        d_padded  = np.zeros_like(padded)
        d_filters = [np.zeros_like(kernel) for kernel in self.filters]
        d_biases  = errors.sum(axis=(1, 2))

        for k, kernel in enumerate(self.filters):
            for i, j, rows, cols in self._windows():
                error = errors[k, i, j]
                d_filters[k]           += error * padded[:, rows, cols]
                d_padded[:, rows, cols] += error * kernel

        p = self._padding
        d_input = d_padded[:, p:p + self._input_height, p:p + self._input_width]
        self.source.add_deltas(d_input.ravel())

        learning_rate = self._network.learning_rate
        for kernel, d_kernel in zip(self.filters, d_filters):
            kernel -= learning_rate * d_kernel
        self.biases -= learning_rate * d_biases

    @property
    def number_parameters(self) -> int:
        return sum(kernel.size for kernel in self.filters) + self.biases.size

    def get_parameters(self) -> np.ndarray:
        return np.concatenate([kernel.ravel() for kernel in self.filters] + [self.biases])

    def set_parameters(self, values) -> None:
        super().set_parameters(values)

        cursor = 0
        for kernel in self.filters:
            kernel[...] = np.reshape(values[cursor:cursor + kernel.size], kernel.shape)
            cursor += kernel.size
        self.biases[...] = values[cursor:]

    def blueprint(self) -> dict[str, Any]:
        return {"n_filters"   : self._n_filters,
                "filter_size" : self._filter_size,
                "stride"      : self._stride,
                "padding"     : self._padding,
                "input_extent": self.input_extent}

    def __repr__(self):
        return (f"ConvolutionLayer(n_filters={self._n_filters}, filter_size={self._filter_size}, "
                f"stride={self._stride}, padding={self._padding}, "
                f"input_extent={self.input_extent}, output_extent={self.output_extent})")
