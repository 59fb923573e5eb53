"""Tests for :mod:`favactors.gui.ui.tasks.image_fetcher`."""

from __future__ import annotations

import os
import threading
import time

import pytest

pytest.importorskip(
    "PySide6",
    reason="PySide6 is required for fetcher tests",
    exc_type=ImportError,
)

from PySide6.QtCore import QCoreApplication
from PySide6.QtWidgets import QApplication

from favactors.errors import RemoteServiceError
from favactors.gui.ui.tasks.image_fetcher import QtImageFetcher
from favactors.gui.utils.main_thread import MainThreadDispatcher


@pytest.fixture(scope="module")
def qapp() -> QApplication:
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    return app


class StubClient:
    def __init__(self, images):
        self._images = images
        self.threads = []

    def fetch_image(self, size, path):
        self.threads.append(threading.get_ident())
        if path not in self._images:
            raise RemoteServiceError(f"404 for {path}")
        return self._images[path]


def _wait_until(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            return False
        QCoreApplication.processEvents()
        time.sleep(0.01)
    return True


def test_completion_runs_on_the_ui_thread(qapp):
    client = StubClient({"/a.jpg": b"jpeg"})
    fetcher = QtImageFetcher(client, parent=None)
    results = []

    fetcher.fetch("w185", "/a.jpg", lambda data, error: results.append((data, error, threading.get_ident())))

    assert _wait_until(lambda: results)
    data, error, thread = results[0]
    assert data == b"jpeg" and error is None
    assert thread == threading.get_ident()
    assert client.threads[0] != threading.get_ident()
    fetcher.shutdown()


def test_errors_are_delivered_to_the_completion(qapp):
    fetcher = QtImageFetcher(StubClient({}))
    results = []

    fetcher.fetch("w185", "/missing.jpg", lambda data, error: results.append((data, error)))

    assert _wait_until(lambda: results)
    assert results[0][0] is None
    assert isinstance(results[0][1], RemoteServiceError)
    fetcher.shutdown()


def test_cancelled_fetch_never_completes(qapp):
    fetcher = QtImageFetcher(StubClient({"/a.jpg": b"jpeg"}))
    results = []

    handle = fetcher.fetch("w185", "/a.jpg", lambda data, error: results.append(data))
    fetcher.cancel(handle)
    fetcher.shutdown()
    QCoreApplication.processEvents()

    assert handle.cancelled
    assert results == []


def test_dispatcher_runs_callables_on_its_thread(qapp):
    dispatcher = MainThreadDispatcher()
    ran_on = []

    worker = threading.Thread(target=lambda: dispatcher(lambda: ran_on.append(threading.get_ident())))
    worker.start()
    worker.join()

    assert _wait_until(lambda: ran_on)
    assert ran_on == [threading.get_ident()]
