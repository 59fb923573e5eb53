"""Disk cache for downloaded actor photos."""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path

_logger = logging.getLogger(__name__)


class ImageCache:
    """Store image bytes under a hash-bucketed directory, keyed by image path.

    The TMDb image path (for example ``/abc123.jpg``) is already unique per
    photo, so it is used as the key regardless of the size class fetched.
    """

    def __init__(self, cache_dir: Path):
        self._cache_dir = cache_dir
        self._cache_dir.mkdir(parents=True, exist_ok=True)

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    def get(self, key: str | None) -> bytes | None:
        if not key:
            return None
        path = self._key_to_path(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            _logger.warning("Cannot read cached image %s: %s", path, exc)
            return None

    def put(self, key: str, data: bytes) -> None:
        path = self._key_to_path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        tmp_path.write_bytes(data)
        tmp_path.replace(path)

    def invalidate(self, key: str | None) -> None:
        if not key:
            return
        path = self._key_to_path(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            _logger.warning("Cannot remove cached image %s: %s", path, exc)

    def contains(self, key: str | None) -> bool:
        return bool(key) and self._key_to_path(key).exists()

    def _key_to_path(self, key: str) -> Path:
        # MD5 is used here solely for uniform hash distribution across
        # bucket directories, not for security.
        hash_hex = hashlib.md5(key.encode("utf-8")).hexdigest()  # noqa: S324
        suffix = Path(key).suffix or ".img"
        return self._cache_dir / hash_hex[:2] / f"{hash_hex}{suffix}"
