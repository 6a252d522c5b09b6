"""
Tests for selection toggling, sums and classification.
"""

import pytest

from sumstack.core.grid import Block, from_rows
from sumstack.core.selection import (
    SelectionOutcome,
    classify,
    evaluate_selection,
    selection_sum,
    toggle_selection,
)


@pytest.fixture
def grid():
    return from_rows([
        [Block(id=1, value=3, row=0, col=0), Block(id=2, value=9, row=0, col=1)],
        [Block(id=3, value=7, row=1, col=0), Block(id=4, value=6, row=1, col=1)],
    ])


class TestToggle:
    """Test the click toggle rule."""

    def test_append_in_click_order(self):
        selected = toggle_selection((), 4)
        selected = toggle_selection(selected, 1)
        assert selected == (4, 1)

    def test_second_click_removes(self):
        assert toggle_selection((4, 1, 2), 1) == (4, 2)


class TestSum:
    """Test sum computation."""

    def test_sum_of_selected(self, grid):
        assert selection_sum(grid, (1, 3)) == 10
        assert selection_sum(grid, (2, 4, 1)) == 18

    def test_empty_selection(self, grid):
        assert selection_sum(grid, ()) == 0

    def test_missing_ids_count_zero(self, grid):
        assert selection_sum(grid, (1, 42)) == 3


class TestClassify:
    """Test match / overshoot / pending ordering."""

    @pytest.mark.parametrize("total,expected", [
        (10, SelectionOutcome.MATCH),
        (15, SelectionOutcome.OVERSHOOT),
        (9, SelectionOutcome.PENDING),
        (0, SelectionOutcome.PENDING),
    ])
    def test_classify(self, total, expected):
        assert classify(total, 10) is expected

    def test_evaluate_selection(self, grid):
        assert evaluate_selection(grid, (1, 3), 10) == (10, SelectionOutcome.MATCH)
        assert evaluate_selection(grid, (2, 4), 10) == (15, SelectionOutcome.OVERSHOOT)
        assert evaluate_selection(grid, (4,), 10) == (6, SelectionOutcome.PENDING)
