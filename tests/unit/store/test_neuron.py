"""
Unit tests for Neuron and Edge.
"""

import pickle
import pytest
import numpy as np
from stacknet.store import Edge, Neuron


class TestNeuronInit:
    """Test Neuron initialization."""

    def test_defaults(self):
        neuron = Neuron()
        assert neuron.id is None
        assert neuron.activation_name is None
        assert neuron.activation is None
        assert not neuron.constant
        assert neuron.output == 0.0
        assert neuron.delta == 0.0
        assert neuron.incoming == []

    def test_activation_looked_up_by_name(self):
        neuron = Neuron(3, "tanh")
        assert neuron.id == 3
        assert neuron.activation(0.5) == pytest.approx(np.tanh(0.5))

    def test_unknown_activation_raises(self):
        with pytest.raises(ValueError, match="Unknown activation"):
            Neuron(0, "bogus")

    def test_constant_neuron_outputs_its_value(self):
        neuron = Neuron(0, constant=1.0)
        assert neuron.constant
        assert neuron.output == 1.0

    def test_incoming_lists_are_not_shared(self):
        a, b = Neuron(), Neuron()
        a.incoming.append("edge")
        assert b.incoming == []


class TestCalculateOutput:
    """Test the forward computation of a single neuron."""

    def test_weighted_sum_through_activation(self):
        x1, x2 = Neuron(0), Neuron(1)
        x1.output, x2.output = 2.0, 3.0
        unit = Neuron(2, "identity")
        unit.incoming = [Edge(0, x1, unit, 0.5), Edge(1, x2, unit, -1.0)]

        unit.calculate_output()

        assert unit.weighted_input == pytest.approx(-2.0)
        assert unit.output == pytest.approx(-2.0)

    def test_sigmoid(self):
        x = Neuron(0)
        x.output = 1.0
        unit = Neuron(1, "sigmoid")
        unit.incoming = [Edge(0, x, unit, 0.0)]
        unit.calculate_output()
        assert unit.output == pytest.approx(0.5)

    def test_constant_ignores_incoming(self):
        x = Neuron(0)
        x.output = 5.0
        unit = Neuron(1, "identity", constant=1.0)
        unit.incoming = [Edge(0, x, unit, 2.0)]
        unit.calculate_output()
        assert unit.output == 1.0

    def test_without_activation_raises(self):
        with pytest.raises(ValueError, match="no activation"):
            Neuron(0).calculate_output()

    def test_reset_delta(self):
        unit = Neuron(0, "relu")
        unit.delta = 4.2
        unit.reset_delta()
        assert unit.delta == 0.0

    def test_picklable(self):
        unit = Neuron(7, "sigmoid")
        clone = pickle.loads(pickle.dumps(unit))
        assert clone.id == 7
        assert clone.activation(0.0) == pytest.approx(0.5)


class TestEdge:
    """Test Edge."""

    def test_attributes(self):
        a, b = Neuron(0), Neuron(1, "identity")
        edge = Edge(5, a, b, 0.75)
        assert edge.id == 5
        assert edge.source is a
        assert edge.target is b
        assert edge.weight == 0.75

    def test_str_mentions_endpoints(self):
        edge = Edge(5, Neuron(0), Neuron(1, "identity"), 0.75)
        assert "0" in str(edge) and "1" in str(edge)
