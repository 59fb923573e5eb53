import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

# Qt tests never open a window.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from favactors.infrastructure.db.pool import ConnectionPool  # noqa: E402
from favactors.infrastructure.repositories.sqlite_person_repository import SQLitePersonRepository  # noqa: E402
from favactors.infrastructure.services.image_cache import ImageCache  # noqa: E402
from favactors.store.context import RecordContext  # noqa: E402


@pytest.fixture
def pool(tmp_path):
    pool = ConnectionPool(tmp_path / "favorites.sqlite", pool_size=2)
    yield pool
    pool.close_all()


@pytest.fixture
def repository(pool):
    return SQLitePersonRepository(pool)


@pytest.fixture
def image_cache(tmp_path):
    return ImageCache(tmp_path / "images")


@pytest.fixture
def record_context(repository, image_cache):
    context = RecordContext(repository, image_cache=image_cache)
    yield context
    context.close()
