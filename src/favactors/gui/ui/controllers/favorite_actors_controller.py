"""Screen controller for the favorite actors list."""

from __future__ import annotations

import logging
from concurrent.futures import Future
from dataclasses import dataclass
from functools import partial
from typing import Callable, Dict, Optional, Protocol

from PySide6.QtCore import QObject, Signal

from ....domain.models import ActorDescriptor, Person
from ....domain.query import PersonQuery
from ....errors import FetchError, PersonNotFoundError
from ....errors.handler import ErrorHandler, ErrorSeverity
from ....infrastructure.services.image_cache import ImageCache
from ....store.context import Dispatcher, RecordContext
from ....store.results_controller import ResultsController
from ....sync.changes import ChangeKind, ChangeObserver
from ....sync.synchronizer import ListSynchronizer
from ..models.favorite_actor_model import FavoriteActorListModel
from ..models.row_display import ImageState, RowDisplay
from ..tasks.image_fetcher import FetchCompletion

logger = logging.getLogger(__name__)

PickerCompletion = Callable[[Optional[ActorDescriptor]], None]
PickerFactory = Callable[[PickerCompletion], None]
DetailPresenter = Callable[[Person], None]


class CancelableFetch(Protocol):
    def cancel(self) -> None: ...


class ImageFetcher(Protocol):
    def fetch(self, size: Optional[str], path: str, completion: FetchCompletion) -> CancelableFetch: ...


def _call_inline(fn: Callable[[], None]) -> None:
    fn()


@dataclass(eq=False)
class FetchToken:
    """The image fetch issued for one row."""

    person: Person
    image_path: Optional[str]
    handle: Optional[CancelableFetch] = None
    # Set once the completion ran; failed fetches stay registered so the
    # row is not fetched again on every repaint.
    finished: bool = False

    def cancel(self) -> None:
        if self.handle is not None and not self.finished:
            self.handle.cancel()
        self.handle = None

    def matches(self, person: Person) -> bool:
        return self.person is person and self.image_path == person.image_path


class FetchTokens:
    """Per-row registry of the current image fetch token."""

    def __init__(self) -> None:
        self._tokens: Dict[int, FetchToken] = {}

    def __len__(self) -> int:
        return len(self._tokens)

    def current(self, row: int) -> Optional[FetchToken]:
        return self._tokens.get(row)

    def issue(self, row: int, person: Person) -> FetchToken:
        """Replace the row's token, cancelling the previous fetch."""

        self.invalidate(row)
        token = FetchToken(person=person, image_path=person.image_path)
        self._tokens[row] = token
        return token

    def is_current(self, row: int, token: FetchToken) -> bool:
        return self._tokens.get(row) is token

    def invalidate(self, row: int) -> None:
        token = self._tokens.pop(row, None)
        if token is not None:
            token.cancel()

    def invalidate_all(self) -> None:
        for row in list(self._tokens):
            self.invalidate(row)

    def reconcile(self, row_count: int, item_at: Callable[[int], Person]) -> int:
        """Drop tokens of rows that vanished or now show another record."""

        stale = [
            row
            for row, token in self._tokens.items()
            if row >= row_count or not token.matches(item_at(row))
        ]
        for row in stale:
            self.invalidate(row)
        return len(stale)


class _ScreenObserver(ChangeObserver):
    """Forward store batches to the synchronizer, then run *after_batch*."""

    def __init__(self, synchronizer: ListSynchronizer[Person], after_batch: Callable[[], None]) -> None:
        self._synchronizer = synchronizer
        self._after_batch = after_batch

    def will_change_content(self) -> None:
        self._synchronizer.will_change_content()

    def did_change_object(
        self,
        kind: ChangeKind,
        old_position: Optional[int] = None,
        new_position: Optional[int] = None,
    ) -> None:
        self._synchronizer.did_change_object(kind, old_position, new_position)

    def did_change_content(self) -> None:
        try:
            self._synchronizer.did_change_content()
        finally:
            self._after_batch()


class FavoriteActorsController(QObject):
    """Drive the favorites screen: rows, photos, add, delete and select.

    Store writes are scheduled on the :class:`RecordContext` thread and never
    touch the visual list directly; the rows follow from the save
    notification. Photos are fetched lazily when a row is rendered. Without
    a *profile_size* the client picks the row size from the TMDb
    configuration.
    """

    countChanged = Signal(int)

    def __init__(
        self,
        context: RecordContext,
        fetcher: ImageFetcher,
        image_cache: ImageCache,
        error_handler: ErrorHandler,
        *,
        profile_size: Optional[str] = None,
        picker_factory: Optional[PickerFactory] = None,
        detail_presenter: Optional[DetailPresenter] = None,
        dispatcher: Optional[Dispatcher] = None,
        query: Optional[PersonQuery] = None,
        model: Optional[FavoriteActorListModel] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._context = context
        self._fetcher = fetcher
        self._image_cache = image_cache
        self._errors = error_handler
        self._profile_size = profile_size
        self._picker_factory = picker_factory
        self._detail_presenter = detail_presenter
        self._dispatch: Dispatcher = dispatcher or _call_inline
        self._query = query or PersonQuery()
        self._model = model if model is not None else FavoriteActorListModel(parent=self)
        self._model.set_renderer(self.render_person)
        self._tokens = FetchTokens()
        self._results: Optional[ResultsController] = None
        self._synchronizer: Optional[ListSynchronizer[Person]] = None

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    def model(self) -> FavoriteActorListModel:
        return self._model

    @property
    def tokens(self) -> FetchTokens:
        return self._tokens

    @property
    def results(self) -> Optional[ResultsController]:
        return self._results

    def set_picker_factory(self, factory: Optional[PickerFactory]) -> None:
        self._picker_factory = factory

    def set_detail_presenter(self, presenter: Optional[DetailPresenter]) -> None:
        self._detail_presenter = presenter

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def load(self) -> None:
        """Run the initial query and fill the list."""

        if self._results is not None:
            self._results.close()
        results = ResultsController(self._context, self._query)
        try:
            results.perform_fetch()
        except FetchError as exc:
            # Shown as an empty list; the next save refreshes it.
            self._errors.handle(exc, ErrorSeverity.WARNING, {"action": "load"})
        self._results = results
        self._synchronizer = ListSynchronizer(self._model, lambda: results.fetched_objects)
        results.delegate = _ScreenObserver(self._synchronizer, self._batch_applied)
        self._tokens.invalidate_all()
        self._synchronizer.reset()
        logger.info("Loaded %d favorite actors", results.count())
        self.countChanged.emit(results.count())

    def close(self) -> None:
        self._tokens.invalidate_all()
        if self._results is not None:
            self._results.close()
            self._results = None
        self._synchronizer = None

    # ------------------------------------------------------------------
    # Rows
    # ------------------------------------------------------------------
    def row_count(self) -> int:
        return self._results.count() if self._results is not None else 0

    def render_row(self, position: int) -> RowDisplay:
        """Return what the row at *position* of the sorted view shows."""

        if self._results is None:
            raise PersonNotFoundError(f"No person at position {position}")
        return self.render_person(position, self._results.object_at(position))

    def render_person(self, row: int, person: Person) -> RowDisplay:
        if person.image is not None:
            self._forget_foreign_token(row, person)
            return RowDisplay(person.name, ImageState.CACHED, person.image)
        if not person.has_image_path:
            self._forget_foreign_token(row, person)
            return RowDisplay(person.name, ImageState.NO_IMAGE)
        token = self._tokens.current(row)
        if token is None or not token.matches(person):
            self._start_fetch(row, person)
        return RowDisplay(person.name, ImageState.LOADING)

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------
    def add_actor_flow(self) -> None:
        """Present the picker; its completion lands in :meth:`actor_picked`."""

        if self._picker_factory is None:
            logger.warning("No actor picker is configured")
            return
        self._picker_factory(self.actor_picked)

    def actor_picked(self, descriptor: Optional[ActorDescriptor]) -> None:
        if descriptor is None:
            logger.debug("Actor picker dismissed without a choice")
            return
        logger.info("Adding favorite actor %s (%d)", descriptor.name, descriptor.id)
        future = self._context.perform(self._insert, descriptor)
        self._report_failure(future, "add", descriptor.id)

    def delete_row(self, position: int) -> None:
        person = self._person_at(position)
        if person is None:
            return
        logger.info("Removing favorite actor %s (%d)", person.name, person.id)
        future = self._context.perform(self._remove, person)
        self._report_failure(future, "delete", person.id)

    def select_row(self, position: int) -> None:
        person = self._person_at(position)
        if person is None or self._detail_presenter is None:
            return
        self._detail_presenter(person)

    # ------------------------------------------------------------------
    # Store work (record context thread)
    # ------------------------------------------------------------------
    def _insert(self, descriptor: ActorDescriptor) -> None:
        self._context.create(descriptor)
        self._context.commit()

    def _remove(self, person: Person) -> None:
        self._context.delete(person)
        self._context.commit()

    def _report_failure(self, future: "Future[None]", action: str, person_id: int) -> None:
        def done(fut: "Future[None]") -> None:
            if fut.cancelled():
                return
            exc = fut.exception()
            if exc is None:
                return
            self._dispatch(
                partial(
                    self._errors.handle,
                    exc,
                    ErrorSeverity.ERROR,
                    {"action": action, "person_id": person_id},
                )
            )

        future.add_done_callback(done)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _person_at(self, position: int) -> Optional[Person]:
        if self._results is None:
            return None
        try:
            return self._results.object_at(position)
        except PersonNotFoundError as exc:
            self._errors.handle(exc, ErrorSeverity.WARNING, {"position": position})
            return None

    def _batch_applied(self) -> None:
        dropped = self._tokens.reconcile(self._model.row_count(), self._model.item_at)
        if dropped:
            logger.debug("Cancelled %d image fetches for repurposed rows", dropped)
        self.countChanged.emit(self.row_count())

    def _forget_foreign_token(self, row: int, person: Person) -> None:
        token = self._tokens.current(row)
        if token is not None and token.person is not person:
            self._tokens.invalidate(row)

    def _start_fetch(self, row: int, person: Person) -> None:
        token = self._tokens.issue(row, person)
        completion = partial(self._image_arrived, row, token)
        handle = self._fetcher.fetch(self._profile_size, person.image_path, completion)
        if not token.finished:
            token.handle = handle

    def _image_arrived(
        self,
        row: int,
        token: FetchToken,
        data: Optional[bytes],
        error: Optional[Exception],
    ) -> None:
        if not self._tokens.is_current(row, token):
            return
        token.finished = True
        token.handle = None
        person = token.person
        if error is not None or not data:
            logger.debug("Image fetch for %s failed: %s", person.image_path, error or "empty response")
            return
        if person.image_path != token.image_path:
            return
        person.image = data
        try:
            self._image_cache.put(person.image_path, data)
        except OSError as exc:
            logger.warning("Could not cache image %s: %s", person.image_path, exc)
        if row < self._model.row_count() and self._model.item_at(row) is person:
            self._model.refresh_row(row)


__all__ = [
    "DetailPresenter",
    "FavoriteActorsController",
    "FetchToken",
    "FetchTokens",
    "ImageFetcher",
    "ImageState",
    "PickerFactory",
    "RowDisplay",
]
