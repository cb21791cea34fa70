"""
Unit tests for saving, loading and visualizing networks.
"""

import pickle
import pytest
import numpy as np
import graphviz

from stacknet.phenotype import Network


class TestPersistence:
    """Test to_bytes(), from_bytes(), save() and load()."""

    def test_bytes_round_trip(self, spatial_network):
        restored = Network.from_bytes(spatial_network.to_bytes())
        x = np.random.random(36)
        np.testing.assert_array_equal(restored.forward_pass(x), spatial_network.forward_pass(x))
        np.testing.assert_array_equal(restored.get_genome(), spatial_network.get_genome())

    def test_configuration_restored(self):
        network = Network("exponential_loss", learning_rate=0.3, reset_jobs=2, sliding_window_size=50)
        network.add_input_layer(3)
        network.add_fully_connected_layer(2, activation="relu")
        restored = Network.from_bytes(network.to_bytes())
        assert restored.loss_function_type == network.loss_function_type
        assert restored.learning_rate == 0.3
        assert restored.statistics.sliding_window_size == 50
        assert repr(restored) == repr(network)

    def test_save_and_load(self, tmp_path, three_layer_network):
        path = three_layer_network.save(tmp_path / "network.bin")
        assert path.exists()
        restored = Network.load(path)
        x = [0.1, -0.2, 0.3, -0.4]
        np.testing.assert_array_equal(restored.forward_pass(x), three_layer_network.forward_pass(x))

    def test_load_accepts_str(self, tmp_path, single_unit_network):
        path = str(tmp_path / "network.bin")
        single_unit_network.save(path)
        assert Network.load(path).number_parameters == 3

    def test_foreign_payload_raises(self):
        with pytest.raises(ValueError, match="Not a serialized network"):
            Network.from_bytes(pickle.dumps({"format": "something else"}))

    def test_restored_network_trains(self, single_unit_network):
        restored = Network.from_bytes(single_unit_network.to_bytes())
        restored.forward_pass([0.5, 0.5])
        restored.backpropagate([1.0])
        assert not np.array_equal(restored.get_genome(), single_unit_network.get_genome())


class TestVisualize:
    """Test visualize()."""

    def test_returns_digraph(self, spatial_network):
        dot = spatial_network.visualize()
        assert isinstance(dot, graphviz.Digraph)

    def test_one_node_per_layer(self, spatial_network):
        source = spatial_network.visualize().source
        for name in ("INPUT", "CONVOLUTION", "POOLING", "FULLY_CONNECTED"):
            assert name in source
        assert "0 -> 1" in source and "2 -> 3" in source

    def test_label_mentions_loss(self, single_unit_network):
        assert "error_squared" in single_unit_network.visualize().source
