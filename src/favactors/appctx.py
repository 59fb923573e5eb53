"""Application-wide context shared by the GUI and the CLI."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Optional

from .di.container import Container

if TYPE_CHECKING:  # pragma: no cover - only for type checking
    from .errors.handler import ErrorHandler
    from .events.bus import EventBus
    from .infrastructure.services.image_cache import ImageCache
    from .infrastructure.services.tmdb_client import TMDbClient
    from .settings.manager import SettingsManager
    from .store.context import RecordContext


def _create_settings_manager() -> "SettingsManager":
    from .settings.manager import SettingsManager

    manager = SettingsManager()
    manager.load()
    return manager


@dataclass
class AppContext:
    """Owns the DI container and the services resolved from it."""

    settings: "SettingsManager" = field(default_factory=_create_settings_manager)
    dispatcher: Optional[Callable[[Callable[[], None]], None]] = None
    data_dir: Optional[Path] = None
    container: Container = field(default_factory=Container)

    def __post_init__(self) -> None:
        from .di.bootstrap import bootstrap

        bootstrap(
            self.container,
            self.settings,
            data_dir=self.data_dir,
            dispatcher=self.dispatcher,
        )

    @property
    def record_context(self) -> "RecordContext":
        from .store.context import RecordContext

        return self.container.resolve(RecordContext)

    @property
    def tmdb(self) -> "TMDbClient":
        from .infrastructure.services.tmdb_client import TMDbClient

        return self.container.resolve(TMDbClient)

    @property
    def image_cache(self) -> "ImageCache":
        from .infrastructure.services.image_cache import ImageCache

        return self.container.resolve(ImageCache)

    @property
    def event_bus(self) -> "EventBus":
        from .events.bus import EventBus

        return self.container.resolve(EventBus)

    @property
    def error_handler(self) -> "ErrorHandler":
        from .errors.handler import ErrorHandler

        return self.container.resolve(ErrorHandler)

    def shutdown(self) -> None:
        """Release the services that were actually created."""

        from .infrastructure.db.pool import ConnectionPool
        from .infrastructure.services.tmdb_client import TMDbClient
        from .store.context import RecordContext

        if self.container.is_resolved(RecordContext):
            self.container.resolve(RecordContext).close()
        if self.container.is_resolved(TMDbClient):
            self.container.resolve(TMDbClient).close()
        if self.container.is_resolved(ConnectionPool):
            self.container.resolve(ConnectionPool).close_all()
