"""
Unit tests for the convolution, pooling, ReLU and softmax layers.

Spatial volumes are laid out depth-major: the value at column x, row y,
channel d sits at index d*height*width + y*width + x.
"""

import pytest
import numpy as np
from stacknet.phenotype import LayerType, Network
from stacknet.phenotype.layers import ConvolutionLayer, PoolingLayer


def spatial_input(extent):
    network = Network(learning_rate=0.1)
    network.add_input_layer(int(np.prod(extent)), extent=extent)
    return network


def backward_from(layer, errors):
    """Seed 'errors' on a layer, run its backward step and return the error signal of its source."""
    layer.add_deltas(errors)
    layer.backpropagate()
    return layer.source.deltas()


# ============================================================================
# Convolution
# ============================================================================

class TestConvolutionShape:
    """Test the output extent and parameter count of convolution layers."""

    def test_output_extent(self):
        network = spatial_input((6, 6, 1))
        extent = network.add_convolution_layer(n_filters=2, filter_size=3, stride=1, padding=0)
        assert extent == (4, 4, 2)
        assert network.output_layer.size == 32
        assert network.output_layer.layer_type == LayerType.CONVOLUTION

    def test_padding_preserves_extent(self):
        network = spatial_input((5, 5, 1))
        assert network.add_convolution_layer(n_filters=3, filter_size=3, stride=1, padding=1) == (5, 5, 3)

    def test_stride(self):
        network = spatial_input((5, 5, 2))
        assert network.add_convolution_layer(n_filters=1, filter_size=3, stride=2, padding=0) == (2, 2, 1)

    def test_untileable_input_raises(self):
        network = spatial_input((4, 4, 1))
        with pytest.raises(ValueError, match="do not tile"):
            network.add_convolution_layer(n_filters=1, filter_size=3, stride=2, padding=0)

    def test_filter_larger_than_input_raises(self):
        network = spatial_input((2, 2, 1))
        with pytest.raises(ValueError):
            network.add_convolution_layer(n_filters=1, filter_size=3)

    def test_needs_an_extent(self):
        network = Network()
        network.add_input_layer(16)
        with pytest.raises(ValueError, match="input extent is required"):
            network.add_convolution_layer(n_filters=1, filter_size=2)

    def test_explicit_extent_over_flat_input(self):
        network = Network()
        network.add_input_layer(16)
        assert network.add_convolution_layer(1, 2, stride=2, input_extent=(4, 4, 1)) == (2, 2, 1)

    def test_explicit_extent_must_match_source(self):
        network = Network()
        network.add_input_layer(16)
        with pytest.raises(ValueError, match="does not match"):
            network.add_convolution_layer(1, 2, input_extent=(3, 3, 1))

    def test_number_parameters(self):
        network = spatial_input((4, 4, 3))
        network.add_convolution_layer(n_filters=2, filter_size=2)
        assert network.output_layer.number_parameters == 2 * 3 * 2 * 2 + 2

    def test_parameters_not_in_store(self):
        network = spatial_input((4, 4, 1))
        network.add_convolution_layer(n_filters=2, filter_size=2)
        assert network.neuron_source.number_parameters == 0
        assert network.number_parameters == 10

    def test_invalid_hyperparameters_raise(self):
        network = spatial_input((4, 4, 1))
        with pytest.raises(ValueError):
            ConvolutionLayer(network.input_layer, 0, 2, 1, 0, network)


class TestConvolutionForward:
    """Test the forward computation of convolution layers."""

    def test_sum_of_blocks(self):
        network = spatial_input((4, 4, 1))
        network.add_convolution_layer(n_filters=1, filter_size=2, stride=2)
        network.set_genome(np.r_[np.ones(4), 0.5])

        outputs = network.forward_pass(np.arange(16.0))

        # blocks {0,1,4,5}, {2,3,6,7}, {8,9,12,13}, {10,11,14,15}
        np.testing.assert_allclose(outputs, [10.5, 18.5, 42.5, 50.5])

    def test_one_channel_per_filter(self):
        network = spatial_input((3, 3, 1))
        layer = ConvolutionLayer(network.input_layer, 2, 3, 1, 0, network)
        network.add(layer)
        network.set_genome(np.r_[np.ones(9), 2 * np.ones(9), 0.0, 1.0])
        np.testing.assert_allclose(network.forward_pass(np.ones(9)), [9.0, 19.0])

    def test_depth_is_summed(self):
        network = spatial_input((1, 1, 3))
        network.add_convolution_layer(n_filters=1, filter_size=1)
        network.set_genome([1.0, 10.0, 100.0, 0.0])
        np.testing.assert_allclose(network.forward_pass([1.0, 2.0, 3.0]), [321.0])

    def test_zero_padding(self):
        network = spatial_input((2, 2, 1))
        network.add_convolution_layer(n_filters=1, filter_size=3, padding=1)
        network.set_genome(np.r_[np.ones(9), 0.0])
        # every 3x3 window covers the whole 2x2 input
        np.testing.assert_allclose(network.forward_pass([1.0, 2.0, 3.0, 4.0]), [10.0] * 4)

    def test_genome_layout(self):
        network = spatial_input((3, 3, 2))
        network.add_convolution_layer(n_filters=2, filter_size=2)
        layer = network.output_layer
        network.set_genome(np.arange(network.number_parameters, dtype=float))

        # filters walked by depth, row, column; biases last
        assert layer.filters[0][0, 0, 0] == 0.0
        assert layer.filters[0][0, 1, 0] == 2.0
        assert layer.filters[0][1, 0, 0] == 4.0
        assert layer.filters[1][0, 0, 0] == 8.0
        np.testing.assert_array_equal(layer.biases, [16.0, 17.0])


class TestConvolutionBackward:
    """Test the backward step of convolution layers."""

    def test_parameter_update(self):
        network = spatial_input((4, 4, 1))
        network.add_convolution_layer(n_filters=1, filter_size=2, stride=2)
        network.set_genome(np.r_[np.ones(4), 0.5])
        outputs = network.forward_pass(np.arange(16.0))

        network.backpropagate(outputs - 1.0)   # dL/dy = 1 for every output

        layer = network.output_layer
        # d_bias = 4; d_filter[0, 0, 0] = 0 + 2 + 8 + 10
        assert layer.biases[0] == pytest.approx(0.5 - 0.1 * 4)
        assert layer.filters[0][0, 0, 0] == pytest.approx(1.0 - 0.1 * 20)
        assert layer.filters[0][0, 1, 1] == pytest.approx(1.0 - 0.1 * (5 + 7 + 13 + 15))

    def test_input_gradient_matches_finite_differences(self):
        network = spatial_input((4, 4, 2))
        network.add_convolution_layer(n_filters=2, filter_size=2, stride=1, padding=1)
        layer  = network.output_layer
        x      = np.random.normal(size=32)
        errors = np.random.normal(size=layer.size)

        h = 1e-6
        numeric = np.array([(errors @ network.forward_pass(x + h * e) - errors @ network.forward_pass(x - h * e))
                            / (2 * h) for e in np.eye(x.size)])

        network.forward_pass(x)
        np.testing.assert_allclose(backward_from(layer, errors), numeric, rtol=1e-5, atol=1e-8)


# ============================================================================
# Pooling
# ============================================================================

class TestPooling:
    """Test max pooling."""

    def test_output_extent(self):
        network = spatial_input((6, 6, 2))
        assert network.add_pooling_layer(2) == (3, 3, 2)

    def test_partial_windows_ignored(self):
        network = spatial_input((5, 5, 1))
        assert network.add_pooling_layer(2) == (2, 2, 1)

    def test_two_dimensional_extent(self):
        network = Network()
        network.add_input_layer(16)
        assert network.add_pooling_layer(2, input_extent=(4, 4)) == (2, 2, 1)

    def test_tessellation_too_large_raises(self):
        network = spatial_input((2, 2, 1))
        with pytest.raises(ValueError, match="larger than"):
            network.add_pooling_layer(3)

    def test_non_positive_tessellation_raises(self):
        network = spatial_input((2, 2, 1))
        with pytest.raises(ValueError):
            PoolingLayer(network.input_layer, 0, network)

    def test_maximum_of_each_window(self):
        network = spatial_input((4, 4, 1))
        network.add_pooling_layer(2)
        np.testing.assert_array_equal(network.forward_pass(np.arange(16.0)), [5.0, 7.0, 13.0, 15.0])

    def test_channels_pooled_separately(self):
        network = spatial_input((2, 2, 2))
        network.add_pooling_layer(2)
        np.testing.assert_array_equal(network.forward_pass([1.0, 4.0, 2.0, 3.0, -1.0, -5.0, -2.0, -3.0]),
                                      [4.0, -1.0])

    def test_error_routed_to_winners(self):
        network = spatial_input((4, 4, 1))
        network.add_pooling_layer(2)
        network.forward_pass(np.arange(16.0)[::-1])
        deltas = backward_from(network.output_layer, [1.0, 2.0, 3.0, 4.0])

        expected = np.zeros(16)
        expected[[0, 2, 8, 10]] = [1.0, 2.0, 3.0, 4.0]
        np.testing.assert_array_equal(deltas, expected)

    def test_no_parameters(self):
        network = spatial_input((4, 4, 1))
        network.add_pooling_layer(2)
        assert network.number_parameters == 0
        assert network.output_layer.blueprint() == {"tessellation": 2, "input_extent": (4, 4, 1)}


# ============================================================================
# ReLU and softmax
# ============================================================================

class TestReLU:
    """Test the ReLU layer."""

    def test_forward(self):
        network = Network()
        network.add_input_layer(4)
        network.add_relu_layer()
        np.testing.assert_array_equal(network.forward_pass([-1.0, 0.0, 2.0, -3.0]), [0.0, 0.0, 2.0, 0.0])

    def test_backward_masks_negative_inputs(self):
        network = Network()
        network.add_input_layer(4)
        network.add_relu_layer()
        network.forward_pass([-1.0, 0.5, 2.0, -3.0])
        deltas = backward_from(network.output_layer, [1.0, 2.0, 3.0, 4.0])
        np.testing.assert_array_equal(deltas, [0.0, 2.0, 3.0, 0.0])

    def test_keeps_extent(self):
        network = spatial_input((2, 2, 3))
        network.add_relu_layer()
        assert network.output_layer.output_extent == (2, 2, 3)


class TestSoftMax:
    """Test the softmax layer."""

    def test_outputs_sum_to_one(self):
        network = Network()
        network.add_input_layer(3)
        network.add_softmax_layer()
        outputs = network.forward_pass([1.0, 2.0, 3.0])
        assert np.sum(outputs) == pytest.approx(1.0)
        np.testing.assert_allclose(outputs, np.exp([1.0, 2.0, 3.0]) / np.sum(np.exp([1.0, 2.0, 3.0])))

    def test_large_inputs_are_stable(self):
        network = Network()
        network.add_input_layer(2)
        network.add_softmax_layer()
        np.testing.assert_allclose(network.forward_pass([1000.0, 1000.0]), [0.5, 0.5])

    def test_backward_matches_finite_differences(self):
        network = Network()
        network.add_input_layer(4)
        network.add_softmax_layer()
        x      = np.array([0.3, -1.0, 2.0, 0.5])
        errors = np.array([1.0, -2.0, 0.5, 3.0])

        h = 1e-6
        numeric = np.array([(errors @ network.forward_pass(x + h * e) - errors @ network.forward_pass(x - h * e))
                            / (2 * h) for e in np.eye(x.size)])

        network.forward_pass(x)
        np.testing.assert_allclose(backward_from(network.output_layer, errors), numeric, rtol=1e-5, atol=1e-8)

    def test_classifier_head(self):
        network = Network()
        network.add_input_layer(4)
        network.add_fully_connected_layer(3, activation="identity")
        network.add_relu_layer()
        network.add_softmax_layer()
        outputs = network.forward_pass([0.1, 0.2, 0.3, 0.4])
        assert outputs.shape == (3,)
        assert np.sum(outputs) == pytest.approx(1.0)
