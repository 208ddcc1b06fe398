"""
Undo/redo history for sheet snapshots.

The history manager keeps two stacks of SheetSnapshot objects. Snapshots are
immutable, so pushing the live snapshot is enough to preserve it: later
mutations build new snapshots and never touch the one in history.
"""

from __future__ import annotations

import logging
from typing import Optional

from gridcalc.spreadsheet.model import SheetSnapshot

logger = logging.getLogger(__name__)


class HistoryManager:
    """Undo and redo stacks around sheet mutations.

    Usage::

        history = HistoryManager()
        history.snapshot_before_mutation(store_snapshot)
        ...apply the mutation...
        previous = history.undo(current_snapshot)

    Attributes:
        limit: Maximum number of undo entries kept, or None for no limit
    """

    def __init__(self, limit: Optional[int] = None) -> None:
        if limit is not None and limit < 1:
            raise ValueError("History limit must be a positive integer")
        self.limit = limit
        self._undo: list[SheetSnapshot] = []
        self._redo: list[SheetSnapshot] = []

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    @property
    def redo_depth(self) -> int:
        return len(self._redo)

    def snapshot_before_mutation(self, snapshot: SheetSnapshot) -> None:
        """Record the state before a mutation and forget undone states."""
        self._undo.append(snapshot)
        if self.limit is not None and len(self._undo) > self.limit:
            del self._undo[: len(self._undo) - self.limit]
        self._redo.clear()
        logger.debug("History push: undo=%d", len(self._undo))

    def discard_last(self) -> None:
        """Drop the most recent undo entry (a mutation that changed nothing)."""
        if self._undo:
            self._undo.pop()

    def undo(self, current: SheetSnapshot) -> Optional[SheetSnapshot]:
        """Step back one mutation.

        Args:
            current: The live snapshot, moved onto the redo stack

        Returns:
            The snapshot to restore, or None if there is nothing to undo
        """
        if not self._undo:
            return None
        self._redo.append(current)
        previous = self._undo.pop()
        logger.debug("Undo: undo=%d redo=%d", len(self._undo), len(self._redo))
        return previous

    def redo(self, current: SheetSnapshot) -> Optional[SheetSnapshot]:
        """Step forward one undone mutation.

        Args:
            current: The live snapshot, moved onto the undo stack

        Returns:
            The snapshot to restore, or None if there is nothing to redo
        """
        if not self._redo:
            return None
        self._undo.append(current)
        following = self._redo.pop()
        logger.debug("Redo: undo=%d redo=%d", len(self._undo), len(self._redo))
        return following

    def clear(self) -> None:
        self._undo.clear()
        self._redo.clear()

    def __repr__(self) -> str:
        return f"HistoryManager(undo={len(self._undo)}, redo={len(self._redo)})"
