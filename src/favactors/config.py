"""Default configuration values for favactors."""

from __future__ import annotations

from typing import Final

APP_NAME: Final[str] = "FavoriteActors"

# ``DATABASE_FILE_NAME`` lives in the data directory configured through the
# settings file; the image cache sits next to it.
DATABASE_FILE_NAME: Final[str] = "favorites.sqlite"
IMAGE_CACHE_DIR_NAME: Final[str] = "images"
DB_POOL_SIZE: Final[int] = 4

# ---------------------------------------------------------------------------
# The Movie Database
# ---------------------------------------------------------------------------

TMDB_API_URL: Final[str] = "https://api.themoviedb.org/3/"
TMDB_IMAGE_URL: Final[str] = "https://image.tmdb.org/t/p/"
TMDB_TIMEOUT_SEC: Final[float] = 10.0
# Used until ``/configuration`` has been fetched once.
TMDB_PROFILE_SIZES: Final[list[str]] = ["w45", "w185", "h632", "original"]
# The list shows small square photos; rows use the second size TMDb offers
# unless the settings name one.
ROW_PROFILE_SIZE_INDEX: Final[int] = 1
API_KEY_ENV_VAR: Final[str] = "FAVACTORS_TMDB_API_KEY"

# ---------------------------------------------------------------------------
# UI
# ---------------------------------------------------------------------------

ROW_IMAGE_SIZE: Final[int] = 64
DETAIL_IMAGE_SIZE: Final[int] = 185
SEARCH_DEBOUNCE_MS: Final[int] = 250
STATUS_MESSAGE_TIMEOUT_MS: Final[int] = 5000
