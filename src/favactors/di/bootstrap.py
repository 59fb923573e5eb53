from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional

from .container import Container
from ..config import DATABASE_FILE_NAME, DB_POOL_SIZE, IMAGE_CACHE_DIR_NAME, TMDB_API_URL, TMDB_TIMEOUT_SEC
from ..domain.repositories import IPersonRepository
from ..errors.handler import ErrorHandler
from ..events.bus import EventBus
from ..infrastructure.db.pool import ConnectionPool
from ..infrastructure.repositories.sqlite_person_repository import SQLitePersonRepository
from ..infrastructure.services.image_cache import ImageCache
from ..infrastructure.services.tmdb_client import TMDbClient
from ..settings.manager import SettingsManager
from ..store.context import RecordContext
from ..utils.logging import get_logger


def bootstrap(
    container: Container,
    settings: SettingsManager,
    *,
    data_dir: Optional[Path] = None,
    dispatcher: Optional[Callable[[Callable[[], None]], None]] = None,
) -> None:
    """Register all application services in the DI container."""
    root = data_dir or settings.data_dir()

    container.register_instance(SettingsManager, settings)
    container.register_instance(logging.Logger, get_logger())
    container.register_singleton(EventBus, EventBus)
    container.register_factory(
        ErrorHandler,
        lambda c: ErrorHandler(c.resolve(logging.Logger), c.resolve(EventBus)),
    )
    container.register_factory(
        ConnectionPool,
        lambda c: ConnectionPool(root / DATABASE_FILE_NAME, pool_size=DB_POOL_SIZE),
    )
    container.register_factory(
        IPersonRepository,
        lambda c: SQLitePersonRepository(c.resolve(ConnectionPool)),
    )
    container.register_factory(ImageCache, lambda c: ImageCache(root / IMAGE_CACHE_DIR_NAME))
    container.register_factory(
        RecordContext,
        lambda c: RecordContext(
            c.resolve(IPersonRepository),
            image_cache=c.resolve(ImageCache),
            dispatcher=dispatcher,
            event_bus=c.resolve(EventBus),
        ),
    )
    container.register_factory(
        TMDbClient,
        lambda c: TMDbClient(
            settings.api_key(),
            api_url=settings.get("tmdb.api_url", TMDB_API_URL),
            timeout=float(settings.get("tmdb.timeout", TMDB_TIMEOUT_SEC)),
        ),
    )
