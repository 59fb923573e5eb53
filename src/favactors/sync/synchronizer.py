"""Apply sorted-view change batches to a visual list."""

from __future__ import annotations

import logging
from bisect import bisect_left
from dataclasses import dataclass, field
from typing import Callable, Generic, List, Optional, Sequence, TypeVar

from ..errors import ChangePreconditionError, SyncInvariantError
from .changes import Change, ChangeKind, ChangeObserver
from .visual_list import VisualList

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class BatchPlan:
    """Row operations for one batch, in the order they must be applied."""

    removals: List[int] = field(default_factory=list)  # old positions, descending
    insertions: List[int] = field(default_factory=list)  # new positions, ascending
    reloads: List[int] = field(default_factory=list)  # new positions
    single_move: Optional[Change] = None

    @classmethod
    def build(cls, changes: Sequence[Change], old_count: int, new_count: int) -> BatchPlan:
        """Validate *changes* against the list sizes and derive the row operations.

        The result does not depend on the order of *changes*: removals use old
        positions, insertions use new positions.
        """

        removed: set[int] = set()
        inserted: set[int] = set()
        updated: set[int] = set()

        def claim(bucket: set[int], position: int, limit: int, label: str, change: Change) -> None:
            if not 0 <= position < limit:
                raise SyncInvariantError(
                    f"{change.kind.name} {label} position {position} outside 0..{limit - 1}"
                )
            if position in bucket:
                raise SyncInvariantError(
                    f"{label} position {position} is claimed twice in one batch"
                )
            bucket.add(position)

        for change in changes:
            if change.kind == ChangeKind.INSERT:
                claim(inserted, change.new_position, new_count, "new", change)
            elif change.kind == ChangeKind.DELETE:
                claim(removed, change.old_position, old_count, "old", change)
            elif change.kind == ChangeKind.UPDATE:
                claim(updated, change.old_position, old_count, "old", change)
            else:
                claim(removed, change.old_position, old_count, "old", change)
                claim(inserted, change.new_position, new_count, "new", change)

        if removed & updated:
            raise SyncInvariantError(
                f"rows {sorted(removed & updated)} are both updated and removed"
            )
        if old_count - len(removed) + len(inserted) != new_count:
            raise SyncInvariantError(
                f"batch turns {old_count} rows into {old_count - len(removed) + len(inserted)}, "
                f"expected {new_count}"
            )

        plan = cls(
            removals=sorted(removed, reverse=True),
            insertions=sorted(inserted),
        )
        if len(changes) == 1 and changes[0].kind == ChangeKind.MOVE:
            plan.single_move = changes[0]

        # Surviving rows keep their relative order, so the k-th survivor in
        # the old list is the k-th non-inserted row in the new list.
        if updated:
            removed_sorted = sorted(removed)
            survivors_new = [row for row in range(new_count) if row not in inserted]
            for old_row in sorted(updated):
                compacted = old_row - bisect_left(removed_sorted, old_row)
                plan.reloads.append(survivors_new[compacted])
        return plan


class ListSynchronizer(ChangeObserver, Generic[T]):
    """Keep a :class:`VisualList` in step with a sorted view's change feed.

    Notifications are queued between :meth:`will_change_content` and
    :meth:`did_change_content` and applied there as one batch. *rows*
    returns the sorted view's current objects; inserted and reloaded rows
    are taken from it.
    """

    def __init__(self, target: VisualList[T], rows: Callable[[], Sequence[T]]) -> None:
        self._target = target
        self._rows = rows
        self._pending: Optional[List[Change]] = None
        self._batches_applied = 0

    @property
    def in_transaction(self) -> bool:
        return self._pending is not None

    @property
    def batches_applied(self) -> int:
        return self._batches_applied

    def reset(self) -> None:
        """Reload the visual list wholesale from the row source."""

        if self._pending is not None:
            raise SyncInvariantError("cannot reset while a batch is open")
        self._target.reset(list(self._rows()))

    # ------------------------------------------------------------------
    # ChangeObserver
    # ------------------------------------------------------------------
    def will_change_content(self) -> None:
        if self._pending is not None:
            raise SyncInvariantError("will_change_content called twice without did_change_content")
        self._pending = []
        self._target.begin_updates()

    def did_change_object(
        self,
        kind: ChangeKind,
        old_position: Optional[int] = None,
        new_position: Optional[int] = None,
    ) -> None:
        if self._pending is None:
            raise SyncInvariantError(f"{kind.name} notification outside of a batch")
        try:
            change = Change(kind, old_position, new_position)
        except ChangePreconditionError:
            # The batch is unusable; leave the target resumed for the caller.
            self._abort()
            raise
        self._pending.append(change)

    def did_change_content(self) -> None:
        if self._pending is None:
            raise SyncInvariantError("did_change_content called without will_change_content")
        changes, self._pending = self._pending, None
        try:
            self._apply(changes)
        finally:
            self._target.end_updates()
        self._batches_applied += 1

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _abort(self) -> None:
        self._pending = None
        self._target.end_updates()

    def _apply(self, changes: List[Change]) -> None:
        rows = list(self._rows())
        old_count = self._target.row_count()
        plan = BatchPlan.build(changes, old_count, len(rows))
        logger.debug(
            "Applying batch: %d removals, %d insertions, %d reloads (%d -> %d rows)",
            len(plan.removals),
            len(plan.insertions),
            len(plan.reloads),
            old_count,
            len(rows),
        )

        if plan.single_move is not None:
            move = plan.single_move
            self._target.move_row(move.old_position, move.new_position)
        else:
            for row in plan.removals:
                self._target.remove_row(row)
            for row in plan.insertions:
                self._target.insert_row(row, rows[row])
        for row in plan.reloads:
            self._target.reload_row(row, rows[row])

        self._verify(rows)

    def _verify(self, rows: Sequence[T]) -> None:
        if self._target.row_count() != len(rows):
            raise SyncInvariantError(
                f"visual list has {self._target.row_count()} rows, sorted view has {len(rows)}"
            )
        for row, item in enumerate(rows):
            if self._target.item_at(row) is not item:
                raise SyncInvariantError(f"row {row} does not match the sorted view after the batch")
