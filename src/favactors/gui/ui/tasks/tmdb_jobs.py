"""Background TMDb lookups used by the picker and the detail page."""

from __future__ import annotations

from PySide6.QtCore import QObject, QRunnable, Signal

from ....errors import RemoteServiceError
from ....infrastructure.services.tmdb_client import TMDbClient


class TMDbJobSignals(QObject):
    """Signals exposed by the TMDb jobs.

    The jobs run on a thread pool; keeping the signals on a separate
    ``QObject`` makes connected slots run on the GUI thread.
    """

    finished = Signal(int, object)
    """Emitted with the request serial and the list of results."""

    failed = Signal(int, str)
    """Emitted with the request serial and an error message."""


class PersonSearchJob(QRunnable):
    """Run ``search/person`` for one query."""

    def __init__(self, client: TMDbClient, query: str, serial: int) -> None:
        super().__init__()
        self._client = client
        self._query = query
        self._serial = serial
        self.signals = TMDbJobSignals()

    def run(self) -> None:  # type: ignore[override]
        try:
            results = self._client.search_person(self._query)
        except RemoteServiceError as exc:
            self.signals.failed.emit(self._serial, str(exc))
            return
        self.signals.finished.emit(self._serial, results)


class MovieCreditsJob(QRunnable):
    """Load the movie credits of one person."""

    def __init__(self, client: TMDbClient, person_id: int, serial: int) -> None:
        super().__init__()
        self._client = client
        self._person_id = person_id
        self._serial = serial
        self.signals = TMDbJobSignals()

    def run(self) -> None:  # type: ignore[override]
        try:
            movies = self._client.movie_credits(self._person_id)
        except RemoteServiceError as exc:
            self.signals.failed.emit(self._serial, str(exc))
            return
        self.signals.finished.emit(self._serial, movies)


__all__ = ["MovieCreditsJob", "PersonSearchJob", "TMDbJobSignals"]
