"""Record store: serialized access context and live sorted views."""

from .context import ContextSaved, RecordContext
from .results_controller import ResultsController

__all__ = ["ContextSaved", "RecordContext", "ResultsController"]
