"""Local Reorder Engine: pure tests for move_item / move_key.

Tests cover:
    - Forward and backward moves
    - Same-index move is a no-op
    - Move then inverse move restores the original order
    - Out-of-range and negative indices raise InvalidReorderError
    - Inputs are not mutated
"""

import pytest

from tracker.core.errors import InvalidReorderError
from tracker.core.reorder import move_item, move_key


def test_move_forward():
    assert move_item(["a", "b", "c", "d"], 0, 2) == ["b", "c", "a", "d"]


def test_move_backward():
    assert move_item(["a", "b", "c", "d"], 3, 1) == ["a", "d", "b", "c"]


def test_move_same_index_is_noop():
    items = ["a", "b", "c"]
    assert move_item(items, 1, 1) == items


@pytest.mark.parametrize("i,j", [(0, 3), (3, 0), (1, 2), (2, 1), (0, 1)])
def test_move_then_inverse_restores(i, j):
    items = ["a", "b", "c", "d"]
    assert move_item(move_item(items, i, j), j, i) == items


def test_move_does_not_mutate_input():
    items = ["a", "b", "c"]
    move_item(items, 0, 2)
    assert items == ["a", "b", "c"]


@pytest.mark.parametrize("i,j", [(3, 0), (0, 3), (-1, 0), (0, -1)])
def test_out_of_range_raises(i, j):
    with pytest.raises(InvalidReorderError) as exc:
        move_item(["a", "b", "c"], i, j)
    assert exc.value.code == "INVALID_REORDER"


@pytest.mark.parametrize("items,i", [([], 0), (["a"], 3), (["a", "b"], -1)])
def test_same_index_is_noop_for_any_length(items, i):
    assert move_item(items, i, i) == items


def test_empty_sequence_raises_for_real_move():
    with pytest.raises(InvalidReorderError):
        move_item([], 0, 1)


def test_move_key_same_index_on_empty_mapping():
    assert move_key({}, 0, 0) == {}


def test_move_key_reorders_dict():
    mapping = {"x": 1, "y": 2, "z": 3}
    reordered = move_key(mapping, 2, 0)
    assert list(reordered) == ["z", "x", "y"]
    assert reordered["z"] == 3
    assert list(mapping) == ["x", "y", "z"]
