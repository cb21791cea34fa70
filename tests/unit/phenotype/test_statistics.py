"""
Unit tests for TrainingStatistics.
"""

import pytest
from stacknet.phenotype import TrainingStatistics


class TestTrainingStatistics:
    """Test cumulative and sliding-window error statistics."""

    def test_initial_state(self):
        stats = TrainingStatistics()
        assert stats.sliding_window_size == 200
        assert stats.examples_seen == 0
        assert stats.error is None
        assert stats.average_error is None

    def test_invalid_window_raises(self):
        with pytest.raises(ValueError):
            TrainingStatistics(0)

    def test_average_error(self):
        stats = TrainingStatistics()
        for error in (1.0, 2.0, 3.0):
            step = stats.record(error)
        assert step.example_count == 3
        assert step.error == 3.0
        assert step.average_error == pytest.approx(2.0)
        assert stats.average_error == pytest.approx(2.0)

    def test_window_average_only_on_completed_windows(self):
        stats = TrainingStatistics(sliding_window_size=3)
        steps = [stats.record(error) for error in (1.0, 2.0, 3.0, 10.0, 20.0, 30.0, 5.0)]
        averages = [step.sliding_window_average for step in steps]
        assert averages[0] is None and averages[1] is None
        assert averages[2] == pytest.approx(2.0)
        assert averages[3] is None and averages[4] is None
        assert averages[5] == pytest.approx(20.0)
        assert averages[6] is None
        assert stats.sliding_window_error == pytest.approx(5.0)

    def test_outputs_and_targets_carried(self):
        step = TrainingStatistics().record(0.5, outputs=[0.1], targets=[0.6])
        assert step.outputs == [0.1]
        assert step.targets == [0.6]

    def test_reset(self):
        stats = TrainingStatistics()
        stats.record(1.0)
        stats.reset()
        assert stats.examples_seen == 0
        assert stats.total_error == 0.0
        assert stats.average_error is None
