"""Serialized access context for person records."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from functools import partial
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, TypeVar, Union

from ..domain.models import ActorDescriptor, Person
from ..domain.query import PersonQuery
from ..domain.repositories import IPersonRepository
from ..errors import CommitError, FavActorsError, PersonNotFoundError
from ..events.bus import EventBus
from ..events.person_events import PersonsCommittedEvent
from ..infrastructure.services.image_cache import ImageCache

logger = logging.getLogger(__name__)

R = TypeVar("R")

Dispatcher = Callable[[Callable[[], None]], None]


def _call_inline(fn: Callable[[], None]) -> None:
    fn()


@dataclass(frozen=True)
class ContextSaved:
    """Payload delivered to save listeners after a successful commit."""

    inserted_ids: Tuple[int, ...] = ()
    deleted_ids: Tuple[int, ...] = ()


@dataclass
class _PendingChanges:
    inserted: Dict[int, Person] = field(default_factory=dict)
    deleted: Dict[int, Person] = field(default_factory=dict)
    # Field values of registered persons overwritten by ``create``.
    originals: Dict[int, Tuple[str, Optional[str], Optional[bytes]]] = field(default_factory=dict)
    # Persons created by ``create`` that were not registered before.
    new_ids: set = field(default_factory=set)

    def __bool__(self) -> bool:
        return bool(self.inserted or self.deleted)


class RecordContext:
    """Single-writer unit of work over :class:`IPersonRepository`.

    All mutations (``create``, ``delete``, ``commit``) must run on the
    context's own worker thread, reached through :meth:`perform` or
    :meth:`perform_and_wait`. Reads through :meth:`fetch` may run on any
    thread. Every fetched record goes through an identity map so the same
    ``id`` always yields the same :class:`Person` object.
    """

    def __init__(
        self,
        repository: IPersonRepository,
        *,
        image_cache: Optional[ImageCache] = None,
        dispatcher: Optional[Dispatcher] = None,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        self._repository = repository
        self._image_cache = image_cache
        self._dispatch: Dispatcher = dispatcher or _call_inline
        self._events = event_bus
        self._executor = ThreadPoolExecutor(
            max_workers=1,
            thread_name_prefix="favactors-store",
            initializer=self._remember_thread,
        )
        self._store_thread: Optional[int] = None
        self._lock = threading.RLock()
        self._registry: Dict[int, Person] = {}
        self._pending = _PendingChanges()
        self._listeners: List[Callable[[ContextSaved], None]] = []
        self._closed = False

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------
    def _remember_thread(self) -> None:
        self._store_thread = threading.get_ident()

    def is_store_thread(self) -> bool:
        return self._store_thread is not None and threading.get_ident() == self._store_thread

    def perform(self, fn: Callable[..., R], *args: Any) -> "Future[R]":
        """Schedule *fn* on the context thread and return its future."""

        if self._closed:
            raise RuntimeError("RecordContext is closed")
        return self._executor.submit(fn, *args)

    def perform_and_wait(self, fn: Callable[..., R], *args: Any) -> R:
        """Run *fn* on the context thread and block until it returns."""

        if self.is_store_thread():
            return fn(*args)
        return self.perform(fn, *args).result()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._executor.shutdown(wait=True)
        with self._lock:
            self._listeners.clear()

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------
    def add_save_listener(self, listener: Callable[[ContextSaved], None]) -> None:
        with self._lock:
            if listener not in self._listeners:
                self._listeners.append(listener)

    def remove_save_listener(self, listener: Callable[[ContextSaved], None]) -> None:
        with self._lock:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def fetch(self, query: PersonQuery) -> List[Person]:
        """Return the persons matching *query* in query order."""

        rows = self._repository.find_by_query(query)
        result: List[Person] = []
        with self._lock:
            for row in rows:
                result.append(self._register(row))
        return result

    def get(self, person_id: int) -> Optional[Person]:
        with self._lock:
            person = self._registry.get(person_id)
        if person is not None:
            return person
        row = self._repository.get(person_id)
        if row is None:
            return None
        with self._lock:
            return self._register(row)

    def _register(self, row: Person) -> Person:
        existing = self._registry.get(row.id)
        if existing is None:
            if self._image_cache is not None:
                row.image = self._image_cache.get(row.image_path)
            self._registry[row.id] = row
            return row
        if row.id not in self._pending.inserted:
            if existing.image_path != row.image_path:
                existing.image = None
            existing.name = row.name
            existing.image_path = row.image_path
        return existing

    # ------------------------------------------------------------------
    # Mutations (context thread only)
    # ------------------------------------------------------------------
    def _require_store_thread(self, operation: str) -> None:
        if not self.is_store_thread():
            raise RuntimeError(f"RecordContext.{operation}() must run inside perform()")

    @property
    def has_changes(self) -> bool:
        with self._lock:
            return bool(self._pending)

    def create(self, source: Union[ActorDescriptor, Mapping[str, Any]]) -> Person:
        """Register a person built from *source* as a pending insert."""

        self._require_store_thread("create")
        if isinstance(source, ActorDescriptor):
            fields = Person(id=source.id, name=source.name, image_path=source.image_path)
        else:
            fields = Person.from_mapping(source)

        with self._lock:
            self._pending.deleted.pop(fields.id, None)
            person = self._registry.get(fields.id)
            if person is None:
                person = fields
                self._registry[person.id] = person
                self._pending.new_ids.add(person.id)
            else:
                self._pending.originals.setdefault(
                    person.id, (person.name, person.image_path, person.image)
                )
                if person.image_path != fields.image_path:
                    person.image = None
                person.name = fields.name
                person.image_path = fields.image_path
            self._pending.inserted[person.id] = person
        return person

    def delete(self, person: Person) -> None:
        """Register *person* as a pending delete."""

        self._require_store_thread("delete")
        with self._lock:
            if self._registry.get(person.id) is not person:
                raise PersonNotFoundError(f"Person {person.id} is not managed by this context")
            if person.id in self._pending.new_ids:
                # Never written; forgetting it is enough.
                self._pending.inserted.pop(person.id, None)
                self._pending.new_ids.discard(person.id)
                self._registry.pop(person.id, None)
                return
            self._pending.inserted.pop(person.id, None)
            self._pending.deleted[person.id] = person

    def rollback(self) -> None:
        """Discard pending changes and restore overwritten field values."""

        self._require_store_thread("rollback")
        with self._lock:
            self._rollback_locked()

    def _rollback_locked(self) -> None:
        for person_id in self._pending.new_ids:
            self._registry.pop(person_id, None)
        for person_id, (name, image_path, image) in self._pending.originals.items():
            person = self._registry.get(person_id)
            if person is not None:
                person.name = name
                person.image_path = image_path
                person.image = image
        self._pending = _PendingChanges()

    def commit(self) -> Optional[ContextSaved]:
        """Write pending changes and notify save listeners.

        Returns ``None`` when nothing was pending. Raises
        :class:`CommitError` after rolling the context back when the
        repository rejects the changes.
        """

        self._require_store_thread("commit")
        with self._lock:
            if not self._pending:
                return None
            inserted = list(self._pending.inserted.values())
            deleted = list(self._pending.deleted.values())

        try:
            self._repository.apply_changes(inserted, [person.id for person in deleted])
        except FavActorsError as exc:
            logger.error(
                "Commit of %d inserts and %d deletes failed: %s", len(inserted), len(deleted), exc
            )
            with self._lock:
                self._rollback_locked()
            raise CommitError(f"Could not save favorite actors: {exc}") from exc

        with self._lock:
            for person in deleted:
                self._registry.pop(person.id, None)
            self._pending = _PendingChanges()
            listeners = list(self._listeners)

        if self._image_cache is not None:
            for person in deleted:
                self._image_cache.invalidate(person.image_path)

        saved = ContextSaved(
            inserted_ids=tuple(person.id for person in inserted),
            deleted_ids=tuple(person.id for person in deleted),
        )
        logger.info("Committed %d inserts and %d deletes", len(inserted), len(deleted))
        for listener in listeners:
            self._dispatch(partial(listener, saved))
        if self._events is not None:
            self._events.publish(
                PersonsCommittedEvent(
                    inserted_ids=list(saved.inserted_ids),
                    deleted_ids=list(saved.deleted_ids),
                    inserted_names=[person.name for person in inserted],
                    deleted_names=[person.name for person in deleted],
                )
            )
        return saved
