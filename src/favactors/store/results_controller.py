"""Live sorted view over the record context."""

from __future__ import annotations

import logging
from typing import Hashable, List, Optional, Sequence, Tuple

from ..domain.models import Person
from ..domain.query import PersonQuery
from ..errors import FavActorsError, FetchError, PersonNotFoundError
from ..sync.changes import ChangeObserver
from ..sync.diff import SnapshotEntry, diff_snapshots
from .context import ContextSaved, RecordContext

logger = logging.getLogger(__name__)


def _row_state(person: Person) -> Tuple[Hashable, ...]:
    return (person.name, person.image_path)


class ResultsController:
    """Expose the persons matching a query and report how the set changes.

    After :meth:`perform_fetch` the controller listens to the context's save
    notifications. Each save re-reads the view, diffs it against the cached
    snapshot and drives :attr:`delegate` with one batch.
    """

    def __init__(self, context: RecordContext, query: Optional[PersonQuery] = None) -> None:
        self._context = context
        self._query = query or PersonQuery()
        self._objects: List[Person] = []
        self._snapshot: List[SnapshotEntry] = []
        self._delegate: Optional[ChangeObserver] = None
        self._listening = False

    @property
    def query(self) -> PersonQuery:
        return self._query

    @property
    def delegate(self) -> Optional[ChangeObserver]:
        return self._delegate

    @delegate.setter
    def delegate(self, observer: Optional[ChangeObserver]) -> None:
        self._delegate = observer

    @property
    def fetched_objects(self) -> Sequence[Person]:
        return tuple(self._objects)

    def count(self) -> int:
        return len(self._objects)

    def object_at(self, position: int) -> Person:
        if not 0 <= position < len(self._objects):
            raise PersonNotFoundError(f"No person at position {position}")
        return self._objects[position]

    def index_of(self, person: Person) -> Optional[int]:
        for index, candidate in enumerate(self._objects):
            if candidate is person:
                return index
        return None

    def perform_fetch(self) -> None:
        """Load the view and start observing the context."""

        if not self._listening:
            self._context.add_save_listener(self._context_did_save)
            self._listening = True
        try:
            objects = self._context.fetch(self._query)
        except FavActorsError as exc:
            raise FetchError(f"Could not load favorite actors: {exc}") from exc
        self._replace(objects)
        logger.debug("Fetched %d persons for %s", len(objects), self._query)

    def close(self) -> None:
        if self._listening:
            self._context.remove_save_listener(self._context_did_save)
            self._listening = False
        self._delegate = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _replace(self, objects: List[Person]) -> None:
        self._objects = objects
        self._snapshot = [(person.id, _row_state(person)) for person in objects]

    def _context_did_save(self, saved: ContextSaved) -> None:
        try:
            fresh = self._context.fetch(self._query)
        except FavActorsError as exc:
            # Keep showing the previous snapshot; the next save retries.
            logger.error("Refreshing favorite actors after save failed: %s", exc)
            return

        previous = self._snapshot
        self._replace(fresh)
        changes = diff_snapshots(previous, self._snapshot)
        logger.debug(
            "Save (inserted=%s, deleted=%s) produced %d changes",
            saved.inserted_ids,
            saved.deleted_ids,
            len(changes),
        )
        delegate = self._delegate
        if not changes or delegate is None:
            return
        delegate.will_change_content()
        for change in changes:
            delegate.did_change_object(change.kind, change.old_position, change.new_position)
        delegate.did_change_content()
