"""Background workers for the favorites UI."""

from .image_fetcher import FetchCompletion, FetchHandle, ImageFetchJob, QtImageFetcher
from .tmdb_jobs import MovieCreditsJob, PersonSearchJob, TMDbJobSignals

__all__ = [
    "FetchCompletion",
    "FetchHandle",
    "ImageFetchJob",
    "MovieCreditsJob",
    "PersonSearchJob",
    "QtImageFetcher",
    "TMDbJobSignals",
]
