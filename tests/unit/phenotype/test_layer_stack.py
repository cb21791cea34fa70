"""
Unit tests for LayerStack.
"""

import pytest
from stacknet.phenotype import LayerStack


@pytest.fixture
def stack():
    stack = LayerStack()
    for name in ("input", "hidden", "output"):
        stack.push(name)
    return stack


class TestLayerStack:
    """Test the ordering guarantees of LayerStack."""

    def test_empty(self):
        stack = LayerStack()
        assert len(stack) == 0
        assert stack.forward_order() == []
        assert stack.backward_order() == []

    def test_empty_top_raises(self):
        with pytest.raises(IndexError):
            LayerStack().top

    def test_empty_bottom_raises(self):
        with pytest.raises(IndexError):
            LayerStack().bottom

    def test_top_is_last_pushed(self, stack):
        assert stack.top == "output"
        assert stack.bottom == "input"

    def test_forward_order(self, stack):
        assert stack.forward_order() == ["input", "hidden", "output"]

    def test_backward_order(self, stack):
        assert stack.backward_order() == ["output", "hidden", "input"]

    def test_orders_are_copies(self, stack):
        stack.forward_order().append("extra")
        stack.backward_order().clear()
        assert len(stack) == 3

    def test_not_iterable(self, stack):
        with pytest.raises(TypeError):
            iter(stack)
