"""Blocking client for The Movie Database REST API.

Every call performs network I/O and must run off the UI thread; the GUI wraps
it in ``QRunnable`` jobs (see ``gui.ui.tasks``).
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, List, Optional

import httpx

from ...config import (
    ROW_PROFILE_SIZE_INDEX,
    TMDB_API_URL,
    TMDB_IMAGE_URL,
    TMDB_PROFILE_SIZES,
    TMDB_TIMEOUT_SEC,
)
from ...domain.models import ActorDescriptor, Movie
from ...errors import RemoteServiceError

_logger = logging.getLogger(__name__)


@dataclass
class ImageConfig:
    """The ``images`` block of ``GET /configuration``."""

    base_url: str = TMDB_IMAGE_URL
    profile_sizes: List[str] = field(default_factory=lambda: list(TMDB_PROFILE_SIZES))

    @property
    def row_profile_size(self) -> str:
        """The size class used for list rows."""

        sizes = self.profile_sizes or TMDB_PROFILE_SIZES
        return sizes[min(ROW_PROFILE_SIZE_INDEX, len(sizes) - 1)]


class TMDbClient:
    """Thin wrapper over :class:`httpx.Client` for the handful of endpoints we use."""

    def __init__(
        self,
        api_key: Optional[str],
        *,
        api_url: str = TMDB_API_URL,
        timeout: float = TMDB_TIMEOUT_SEC,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._api_key = api_key or None
        self._client = httpx.Client(
            base_url=api_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
            follow_redirects=True,
        )
        self._image_config: Optional[ImageConfig] = None
        self._config_lock = threading.Lock()

    @property
    def has_api_key(self) -> bool:
        return self._api_key is not None

    def close(self) -> None:
        self._client.close()

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------
    def image_config(self) -> ImageConfig:
        """Return the image configuration, fetching it once when possible.

        Without an API key, or when the request fails, the built-in defaults
        are used so images can still be downloaded.
        """

        with self._config_lock:
            if self._image_config is not None:
                return self._image_config
            config = ImageConfig()
            if self.has_api_key:
                try:
                    payload = self._get_json("configuration")
                except RemoteServiceError as exc:
                    _logger.warning("Using default image configuration: %s", exc)
                else:
                    images = payload.get("images") or {}
                    base_url = images.get("secure_base_url") or images.get("base_url")
                    if base_url:
                        config.base_url = base_url
                    sizes = images.get("profile_sizes")
                    if sizes:
                        config.profile_sizes = list(sizes)
            self._image_config = config
            return config

    def image_url(self, size: str, path: str) -> str:
        base = self.image_config().base_url.rstrip("/")
        return f"{base}/{size}/{path.lstrip('/')}"

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------
    def search_person(self, query: str) -> List[ActorDescriptor]:
        """Return actors whose name matches *query*, most popular first."""

        text = query.strip()
        if not text:
            return []
        payload = self._get_json("search/person", query=text, include_adult="false")
        results: List[ActorDescriptor] = []
        for item in payload.get("results") or []:
            try:
                results.append(ActorDescriptor.from_mapping(item))
            except (KeyError, TypeError, ValueError):
                _logger.debug("Skipping malformed search result %r", item)
        return results

    def movie_credits(self, person_id: int) -> List[Movie]:
        """Return the cast credits of *person_id*, newest release first."""

        payload = self._get_json(f"person/{int(person_id)}/movie_credits")
        movies: List[Movie] = []
        for item in payload.get("cast") or []:
            try:
                movies.append(
                    Movie(
                        id=int(item["id"]),
                        title=str(item.get("title") or item.get("original_title") or ""),
                        release_date=item.get("release_date") or None,
                        character=item.get("character") or None,
                    )
                )
            except (KeyError, TypeError, ValueError):
                _logger.debug("Skipping malformed credit %r", item)
        movies.sort(key=lambda movie: movie.release_date or "", reverse=True)
        return movies

    def fetch_image(self, size: Optional[str], path: str) -> bytes:
        """Download the image bytes for *path* at *size*.

        Without *size* the row size from the remote configuration is used.
        """

        if not size:
            size = self.image_config().row_profile_size
        url = self.image_url(size, path)
        try:
            response = self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise RemoteServiceError(f"Image download failed for {url}: {exc}") from exc
        return response.content

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _get_json(self, endpoint: str, **params: Any) -> dict:
        if not self.has_api_key:
            raise RemoteServiceError("TMDb API key is not configured")
        params["api_key"] = self._api_key
        try:
            response = self._client.get(endpoint, params=params)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            raise RemoteServiceError(
                f"TMDb request {endpoint} failed with status {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise RemoteServiceError(f"TMDb request {endpoint} failed: {exc}") from exc
        except ValueError as exc:
            raise RemoteServiceError(f"TMDb request {endpoint} returned invalid JSON") from exc
        if not isinstance(payload, dict):
            raise RemoteServiceError(f"TMDb request {endpoint} returned an unexpected payload")
        return payload
