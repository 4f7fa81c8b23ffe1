"""Stable list selection keyed by opaque selection keys instead of indices."""

from __future__ import annotations

from collections.abc import Sequence

from .types import HeaderItem, ListItem


def is_selectable(item: ListItem) -> bool:
    return not isinstance(item, HeaderItem)


def selectable_indices(items: Sequence[ListItem]) -> list[int]:
    """Return indices of rows that can hold the selection."""
    return [index for index, item in enumerate(items) if is_selectable(item)]


def first_selectable_index(items: Sequence[ListItem]) -> int:
    """Return the first non-header index, or ``0`` when there is none."""
    for index, item in enumerate(items):
        if is_selectable(item):
            return index
    return 0


def nearest_surviving_key(
    old_items: Sequence[ListItem],
    old_index: int,
    new_items: Sequence[ListItem],
) -> str | None:
    """Pick the key of the closest old neighbor that still exists after a change.

    Neighbors below the old selection are preferred over ones above it at the
    same distance.
    """
    new_keys = {item.selection_key for item in new_items if is_selectable(item)}
    for distance in range(1, len(old_items)):
        for candidate in (old_index + distance, old_index - distance):
            if not 0 <= candidate < len(old_items):
                continue
            item = old_items[candidate]
            if is_selectable(item) and item.selection_key in new_keys:
                return item.selection_key
    return None


class SelectionTracker:
    """Map selection keys to row indices for the most recently seen list."""

    def __init__(self) -> None:
        self._items: Sequence[ListItem] | None = None
        self._index_by_key: dict[str, int] = {}
        self._first_selectable = 0

    def _rebuild(self, items: Sequence[ListItem]) -> None:
        self._items = items
        self._index_by_key = {
            item.selection_key: index for index, item in enumerate(items) if is_selectable(item)
        }
        self._first_selectable = first_selectable_index(items)

    def resolve(self, key: str | None, items: Sequence[ListItem]) -> int:
        """Return the row index for ``key`` in ``items`` with first-item fallback."""
        if items is not self._items:
            self._rebuild(items)
        if key is not None:
            index = self._index_by_key.get(key)
            if index is not None:
                return index
        return self._first_selectable

    def contains(self, key: str | None, items: Sequence[ListItem]) -> bool:
        if items is not self._items:
            self._rebuild(items)
        return key is not None and key in self._index_by_key


__all__ = [
    "is_selectable",
    "selectable_indices",
    "first_selectable_index",
    "nearest_surviving_key",
    "SelectionTracker",
]
