"""
History Engine

Linear undo/redo over full-state snapshots.

    log:    [s0, s1, s2, s3]
    cursor:              ^      can_undo = cursor > 0
                                can_redo = cursor < len(log) - 1

- record():  drop everything after the cursor, append, cursor -> end
- undo():    cursor - 1, hand back that state
- redo():    cursor + 1, hand back that state
- restore(): cursor -> snapshot index, hand back that state
- clear():   empty log; the live state is untouched

DESIGN DECISION: Restore is linear, not branching. Jumping back to a
snapshot only moves the cursor; undo/redo keep walking the same log, and
the next mutation truncates everything after the restored point.

The engine never touches the live state itself. It returns copies of
captured states and the caller installs them.
"""

from typing import Optional
from uuid import UUID

from ledger.config import get_settings
from ledger.errors import SnapshotNotFoundError
from ledger.models.entities import LedgerState
from ledger.models.history import HistoryEntry, HistoryEntryBuilder, HistorySnapshot


class HistoryEngine:
    """Bounded, cursor-based log of ledger snapshots."""

    def __init__(self, limit: Optional[int] = None):
        """
        Initialize the history log.

        Args:
            limit: Maximum number of snapshots kept.
                   Defaults to the configured history limit.
        """
        self._limit = limit or get_settings().history.limit
        self._snapshots: list[HistorySnapshot] = []
        self._cursor = -1

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def snapshots(self) -> list[HistorySnapshot]:
        return list(self._snapshots)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def current(self) -> Optional[HistorySnapshot]:
        if self._cursor < 0:
            return None
        return self._snapshots[self._cursor]

    @property
    def is_empty(self) -> bool:
        return not self._snapshots

    @property
    def can_undo(self) -> bool:
        return self._cursor > 0

    @property
    def can_redo(self) -> bool:
        return self._cursor < len(self._snapshots) - 1

    def record(
        self,
        entry: HistoryEntry,
        state: LedgerState,
        previous_state: Optional[LedgerState] = None,
    ) -> HistorySnapshot:
        """
        Append a snapshot of `state` described by `entry`.

        On an empty log, `previous_state` (the state before this mutation)
        is captured first as the baseline, so the first change can be
        undone too.
        """
        if self.is_empty and previous_state is not None:
            self._append(HistoryEntryBuilder.initial(), previous_state)

        # Moving back and then changing something discards the redo branch
        del self._snapshots[self._cursor + 1:]
        return self._append(entry, state)

    def undo(self) -> Optional[LedgerState]:
        """Step back one snapshot. Returns None when there is nothing to undo."""
        if not self.can_undo:
            return None
        self._cursor -= 1
        return self._snapshots[self._cursor].state.copy_state()

    def redo(self) -> Optional[LedgerState]:
        """Step forward one snapshot. Returns None when there is nothing to redo."""
        if not self.can_redo:
            return None
        self._cursor += 1
        return self._snapshots[self._cursor].state.copy_state()

    def restore(self, snapshot_id: UUID) -> LedgerState:
        """
        Jump to any snapshot in the log.

        Raises:
            SnapshotNotFoundError: If the id is not in the log
        """
        for index, snapshot in enumerate(self._snapshots):
            if snapshot.id == snapshot_id:
                self._cursor = index
                return snapshot.state.copy_state()
        raise SnapshotNotFoundError(snapshot_id)

    def get(self, snapshot_id: UUID) -> Optional[HistorySnapshot]:
        for snapshot in self._snapshots:
            if snapshot.id == snapshot_id:
                return snapshot
        return None

    def clear(self) -> None:
        self._snapshots = []
        self._cursor = -1

    def _append(self, entry: HistoryEntry, state: LedgerState) -> HistorySnapshot:
        snapshot = HistorySnapshot(
            **entry.model_dump(),
            state=state.copy_state(),
        )
        self._snapshots.append(snapshot)

        overflow = len(self._snapshots) - self._limit
        if overflow > 0:
            del self._snapshots[:overflow]

        self._cursor = len(self._snapshots) - 1
        return snapshot
