"""Navigation model: level stack, sectioned list rows, and stable selection.

This package has no rendering or terminal concerns.
"""

from __future__ import annotations

from .types import BackItem, EntryItem, HeaderItem, ListItem, NavLevel, RecentEntry, Shortcut
from .stack import NavigationStack
from .list_builder import build_list_items, display_name_for_path, exact_favorite_path, filter_list_items
from .selection import SelectionTracker, nearest_surviving_key, selectable_indices
from .session import NavigatorSession

__all__ = [
    "BackItem",
    "EntryItem",
    "HeaderItem",
    "ListItem",
    "NavLevel",
    "RecentEntry",
    "Shortcut",
    "NavigationStack",
    "build_list_items",
    "display_name_for_path",
    "exact_favorite_path",
    "filter_list_items",
    "SelectionTracker",
    "nearest_surviving_key",
    "selectable_indices",
    "NavigatorSession",
]
