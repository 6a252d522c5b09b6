"""
Selection Evaluator
===================

Toggles block ids in and out of the current selection and classifies
the selected sum against the target.
"""

from __future__ import annotations

from enum import Enum
from typing import Sequence, Tuple

from sumstack.core.grid import Grid, find_block


class SelectionOutcome(str, Enum):
    """Classification of a selection sum relative to the target."""
    MATCH = "match"
    OVERSHOOT = "overshoot"
    PENDING = "pending"


def toggle_selection(selected_ids: Sequence[int], block_id: int) -> Tuple[int, ...]:
    """
    Toggle a block id in a selection.

    Selected ids are removed; others are appended, so the result keeps
    click order.
    """
    if block_id in selected_ids:
        return tuple(sid for sid in selected_ids if sid != block_id)
    return tuple(selected_ids) + (block_id,)


def selection_sum(grid: Grid, selected_ids: Sequence[int]) -> int:
    """Sum of the selected block values. Unknown ids contribute 0."""
    total = 0
    for block_id in selected_ids:
        block = find_block(grid, block_id)
        if block is not None:
            total += block.value
    return total


def classify(total: int, target: int) -> SelectionOutcome:
    """Match, overshoot or pending, checked in that order."""
    if total == target:
        return SelectionOutcome.MATCH
    if total > target:
        return SelectionOutcome.OVERSHOOT
    return SelectionOutcome.PENDING


def evaluate_selection(
    grid: Grid,
    selected_ids: Sequence[int],
    target: int
) -> Tuple[int, SelectionOutcome]:
    """
    Sum and classify a selection.

    Args:
        grid: Current grid.
        selected_ids: Selection after the click was toggled in or out.
        target: Current target.

    Returns:
        (sum, outcome) tuple.
    """
    total = selection_sum(grid, selected_ids)
    return total, classify(total, target)
