"""Local Reorder Engine: drag-and-drop permutations with no remote call.

Invariants:
    - move_item is PURE: returns a new list, input untouched
    - from_index == to_index returns an equal copy, whatever the length
    - move_item(move_item(xs, i, j), j, i) == xs for valid i, j
    - Otherwise out-of-range indices raise InvalidReorderError (negative included)
"""

from collections.abc import Mapping, Sequence
from typing import TypeVar

from tracker.core.errors import InvalidReorderError

T = TypeVar("T")
K = TypeVar("K")


def move_item(items: Sequence[T], from_index: int, to_index: int) -> list[T]:
    """Remove the element at from_index and reinsert it at to_index."""
    if from_index == to_index:
        return list(items)
    length = len(items)
    if not (0 <= from_index < length and 0 <= to_index < length):
        raise InvalidReorderError(from_index, to_index, length)
    result = list(items)
    item = result.pop(from_index)
    result.insert(to_index, item)
    return result


def move_key(
    mapping: Mapping[K, T], from_index: int, to_index: int,
) -> dict[K, T]:
    """Reorder an insertion-ordered dict by position."""
    keys = move_item(list(mapping), from_index, to_index)
    return {k: mapping[k] for k in keys}
