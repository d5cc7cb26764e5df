"""Pure reordering helpers for a period's queue.

All helpers take the current order and return a new list; the input is never
mutated. Ranks are assigned as ``base_time + index`` so the persisted order is
total and strictly increasing.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")


def move(items: Sequence[T], from_index: int, to_index: int) -> list[T]:
    """Splice the element at ``from_index`` into ``to_index``.

    Elements between the two positions shift by one. Dropping an element on
    its own position returns an unchanged copy.

    Raises:
        IndexError: If either index is outside the list.
    """
    size = len(items)
    if not 0 <= from_index < size or not 0 <= to_index < size:
        raise IndexError(f"Queue position out of range (size {size})")

    reordered = list(items)
    if from_index == to_index:
        return reordered
    moved = reordered.pop(from_index)
    reordered.insert(to_index, moved)
    return reordered


def move_to_top(items: Sequence[T], item: T) -> list[T]:
    """Put ``item`` first; everyone else keeps their relative order.

    Raises:
        ValueError: If ``item`` is not in the list.
    """
    if item not in items:
        raise ValueError("Item is not in the queue")
    return [item, *(other for other in items if other != item)]


def move_up(items: Sequence[T], item: T) -> list[T]:
    """Swap ``item`` with its predecessor. No-op at the head.

    Raises:
        ValueError: If ``item`` is not in the list.
    """
    reordered = list(items)
    index = reordered.index(item)
    if index > 0:
        reordered[index - 1], reordered[index] = reordered[index], reordered[index - 1]
    return reordered


def assign_ranks(items: Sequence[T], base_time: int) -> list[tuple[T, int]]:
    """Pair every element with its new rank ``base_time + index``."""
    return [(item, base_time + index) for index, item in enumerate(items)]


def next_tail_rank(current_ranks: Sequence[int], now: int) -> int:
    """Return a rank that sorts after every existing rank.

    A reorder may have written ranks slightly in the future, so a fresh arrival
    takes ``max(now, highest + 1)``.
    """
    if not current_ranks:
        return now
    return max(now, max(current_ranks) + 1)
