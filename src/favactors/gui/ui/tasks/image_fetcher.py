"""Cancelable remote image downloads on a Qt thread pool."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from PySide6.QtCore import QCoreApplication, QObject, QRunnable, QThreadPool, Signal

from ....errors import RemoteServiceError
from ....infrastructure.services.tmdb_client import TMDbClient

logger = logging.getLogger(__name__)

FetchCompletion = Callable[[Optional[bytes], Optional[Exception]], None]


class FetchHandle:
    """Identifies one in-flight fetch; :meth:`cancel` suppresses its completion."""

    def __init__(self, size: Optional[str], path: str) -> None:
        self.size = size
        self.path = path
        self._cancelled = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        self._cancelled.set()

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else "active"
        return f"FetchHandle({self.size!r}, {self.path!r}, {state})"


class ImageFetchJob(QRunnable):
    """Download one image and hand the result back to :class:`QtImageFetcher`."""

    def __init__(
        self,
        fetcher: "QtImageFetcher",
        client: TMDbClient,
        handle: FetchHandle,
        completion: FetchCompletion,
    ) -> None:
        super().__init__()
        self._fetcher = fetcher
        self._client = client
        self._handle = handle
        self._completion = completion

    def run(self) -> None:  # pragma: no cover - executed in worker thread
        if self._handle.cancelled:
            return
        data: Optional[bytes] = None
        error: Optional[Exception] = None
        try:
            data = self._client.fetch_image(self._handle.size, self._handle.path)
        except RemoteServiceError as exc:
            error = exc
        try:
            self._fetcher._delivered.emit(self._handle, data, error, self._completion)
        except RuntimeError:
            # Fetcher deleted while the download was running.
            pass


class QtImageFetcher(QObject):
    """Run image downloads off the UI thread and complete them on it.

    ``fetch`` returns a :class:`FetchHandle`. Completions of cancelled
    handles are dropped on the UI thread, so a cancel issued before the
    result is delivered always wins.
    """

    _delivered = Signal(object, object, object, object)

    def __init__(
        self,
        client: TMDbClient,
        *,
        max_threads: int = 4,
        parent: Optional[QObject] = None,
    ) -> None:
        if parent is None:
            parent = QCoreApplication.instance()
        super().__init__(parent)
        self._client = client
        self._pool = QThreadPool(self)
        self._pool.setMaxThreadCount(max(1, max_threads))
        self._delivered.connect(self._handle_result)

    def fetch(self, size: Optional[str], path: str, completion: FetchCompletion) -> FetchHandle:
        handle = FetchHandle(size, path)
        self._pool.start(ImageFetchJob(self, self._client, handle, completion))
        return handle

    def cancel(self, handle: FetchHandle) -> None:
        handle.cancel()

    def shutdown(self) -> None:
        self._pool.clear()
        self._pool.waitForDone()

    def _handle_result(
        self,
        handle: FetchHandle,
        data: Optional[bytes],
        error: Optional[Exception],
        completion: FetchCompletion,
    ) -> None:
        if handle.cancelled:
            logger.debug("Dropping result of cancelled fetch %s", handle.path)
            return
        completion(data, error)


__all__ = ["FetchCompletion", "FetchHandle", "ImageFetchJob", "QtImageFetcher"]
