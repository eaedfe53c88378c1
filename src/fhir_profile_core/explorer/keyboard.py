"""Keyboard navigation over the flattened project tree.

``handle_key`` is a pure reducer: given the visible rows, the selected path,
the expansion set and a key, it returns the single action the key implies.
``TreeStore.apply_key`` performs the action.

Key semantics:
- DOWN / UP:  select the next / previous visible row.
- RIGHT:      on a collapsed folder, expand it; on an expanded folder,
              select the next row (its first child when it has one).
- LEFT:       on an expanded folder, collapse it; otherwise select the
              parent row when it is visible.
- SPACE:      toggle a folder.
- ENTER:      activate the selected node.
"""

from __future__ import annotations

from collections.abc import Sequence, Set
from dataclasses import dataclass
from enum import StrEnum, auto

from fhir_profile_core.explorer.nodes import FlattenedRow

__all__ = ["ActionKind", "KeyAction", "TreeKey", "handle_key"]


class TreeKey(StrEnum):
    UP = auto()
    DOWN = auto()
    LEFT = auto()
    RIGHT = auto()
    SPACE = auto()
    ENTER = auto()


class ActionKind(StrEnum):
    NONE = auto()
    SELECT = auto()
    TOGGLE = auto()
    ACTIVATE = auto()


@dataclass(frozen=True, slots=True)
class KeyAction:
    """What a key press resolves to; ``path`` is None only for NONE."""

    kind: ActionKind
    path: str | None = None


NO_ACTION = KeyAction(ActionKind.NONE)


def handle_key(
    rows: Sequence[FlattenedRow],
    selected_path: str | None,
    expanded: Set[str],
    key: TreeKey,
) -> KeyAction:
    """Resolve ``key`` against the current visible rows.

    Args:
        rows:          Flattened visible rows, in display order.
        selected_path: Currently selected path, or None.
        expanded:      Expanded folder paths.
        key:           The key pressed.

    Returns:
        The action to apply; ``NO_ACTION`` when nothing is selected, the
        selection is not visible, or the key has no effect here.
    """
    if not selected_path or not rows:
        return NO_ACTION

    index = next(
        (i for i, row in enumerate(rows) if row.node.path == selected_path), None
    )
    if index is None:
        return NO_ACTION
    current = rows[index].node

    if key == TreeKey.DOWN:
        return _select(rows, index + 1)
    if key == TreeKey.UP:
        return _select(rows, index - 1)
    if key == TreeKey.RIGHT:
        if not current.is_folder:
            return NO_ACTION
        if current.path not in expanded:
            return KeyAction(ActionKind.TOGGLE, current.path)
        return _select(rows, index + 1)
    if key == TreeKey.LEFT:
        if current.is_folder and current.path in expanded:
            return KeyAction(ActionKind.TOGGLE, current.path)
        parent_path = current.path.rpartition("/")[0]
        if parent_path and any(row.node.path == parent_path for row in rows):
            return KeyAction(ActionKind.SELECT, parent_path)
        return NO_ACTION
    if key == TreeKey.SPACE:
        if current.is_folder:
            return KeyAction(ActionKind.TOGGLE, current.path)
        return NO_ACTION
    if key == TreeKey.ENTER:
        return KeyAction(ActionKind.ACTIVATE, current.path)
    return NO_ACTION


def _select(rows: Sequence[FlattenedRow], index: int) -> KeyAction:
    if 0 <= index < len(rows):
        return KeyAction(ActionKind.SELECT, rows[index].node.path)
    return NO_ACTION
