from .image_cache import ImageCache
from .tmdb_client import ImageConfig, TMDbClient

__all__ = ["ImageCache", "ImageConfig", "TMDbClient"]
