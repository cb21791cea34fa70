"""Pytest configuration and shared fixtures."""

import random
import sys
from pathlib import Path

import numpy as np
import pytest

# Add the source directory to the Python path
src_dir = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_dir))


@pytest.fixture(autouse=True)
def set_random_seeds():
    """Seed both random number generators so every test is reproducible."""
    np.random.seed(42)
    random.seed(42)
    yield
    np.random.seed(None)
    random.seed(None)


@pytest.fixture
def single_unit_network():
    """{Input(2), FullyConnected(1)}"""
    from stacknet.phenotype import Network
    network = Network()
    network.add_input_layer(2)
    network.add_fully_connected_layer(1)
    return network


@pytest.fixture
def three_layer_network():
    """{Input(4), FullyConnected(3), FullyConnected(1)}"""
    from stacknet.phenotype import Network
    network = Network()
    network.add_input_layer(4)
    network.add_fully_connected_layer(3)
    network.add_fully_connected_layer(1)
    return network


@pytest.fixture
def spatial_network():
    """{Input(6x6x1), Convolution(2 filters 3x3), Pooling(2), FullyConnected(3)}"""
    from stacknet.phenotype import Network
    network = Network()
    network.add_input_layer(36, extent=(6, 6, 1))
    network.add_convolution_layer(n_filters=2, filter_size=3, stride=1, padding=0)
    network.add_pooling_layer(2)
    network.add_fully_connected_layer(3)
    return network
