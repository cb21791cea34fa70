"""
Unit tests for NeuronSource, the registry of a network's neurons and edges.
"""

import pytest
import numpy as np
from stacknet.store import NeuronSource


@pytest.fixture
def source_with_edges():
    """Two inputs connected to one identity unit."""
    store = NeuronSource()
    x1 = store.generate_neuron()
    x2 = store.generate_neuron()
    y  = store.generate_neuron("identity")
    store.generate_edge(x1, y, 0.5)
    store.generate_edge(x2, y, -1.0)
    return store


class TestGenerateNeuron:
    """Test neuron generation."""

    def test_ids_are_sequential(self):
        store = NeuronSource()
        ids = [store.generate_neuron().id for _ in range(5)]
        assert ids == [0, 1, 2, 3, 4]

    def test_registered(self):
        store = NeuronSource()
        neuron = store.generate_neuron("relu")
        assert store.find_neuron(neuron.id) is neuron
        assert neuron.activation_name == "relu"

    def test_sources_number_independently(self):
        a, b = NeuronSource(), NeuronSource()
        a.generate_neuron()
        a.generate_neuron()
        assert b.generate_neuron().id == 0

    def test_constant(self):
        neuron = NeuronSource().generate_neuron(constant=1.0)
        assert neuron.constant
        assert neuron.output == 1.0

    def test_find_unknown_raises(self):
        store = NeuronSource()
        store.generate_neuron()
        with pytest.raises(KeyError):
            store.find_neuron(99)


class TestGenerateEdge:
    """Test edge generation."""

    def test_edge_ids_follow_generation_order(self, source_with_edges):
        assert [edge.id for edge in source_with_edges.edges] == [0, 1]

    def test_edge_appended_to_target(self, source_with_edges):
        y = source_with_edges.find_neuron(2)
        assert [edge.id for edge in y.incoming] == [0, 1]
        assert y.incoming[0].source is source_with_edges.find_neuron(0)

    def test_weight_stored_as_float(self):
        store = NeuronSource()
        a, b = store.generate_neuron(), store.generate_neuron("identity")
        edge = store.generate_edge(a, b, np.float32(0.25))
        assert type(edge.weight) is float


class TestParameters:
    """Test the edge weights as a flat parameter vector."""

    def test_number_parameters(self, source_with_edges):
        assert source_with_edges.number_parameters == 2

    def test_get_parameters(self, source_with_edges):
        np.testing.assert_array_equal(source_with_edges.get_parameters(), [0.5, -1.0])

    def test_set_parameters(self, source_with_edges):
        source_with_edges.set_parameters(np.array([2.0, 3.0]))
        assert [edge.weight for edge in source_with_edges.edges] == [2.0, 3.0]

    def test_set_then_forward(self, source_with_edges):
        source_with_edges.set_parameters([1.0, 1.0])
        source_with_edges.find_neuron(0).output = 2.0
        source_with_edges.find_neuron(1).output = 3.0
        y = source_with_edges.find_neuron(2)
        y.calculate_output()
        assert y.output == pytest.approx(5.0)

    def test_wrong_length_raises_and_writes_nothing(self, source_with_edges):
        with pytest.raises(ValueError, match="Expected 2"):
            source_with_edges.set_parameters([1.0, 2.0, 3.0])
        np.testing.assert_array_equal(source_with_edges.get_parameters(), [0.5, -1.0])

    def test_empty_store(self):
        store = NeuronSource()
        assert store.number_parameters == 0
        assert store.get_parameters().shape == (0,)
