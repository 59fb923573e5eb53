"""Observer-driven synchronisation of a visual list with a sorted view."""

from .changes import Change, ChangeKind, ChangeObserver
from .diff import diff_snapshots
from .synchronizer import BatchPlan, ListSynchronizer
from .visual_list import VisualList

__all__ = [
    "BatchPlan",
    "Change",
    "ChangeKind",
    "ChangeObserver",
    "ListSynchronizer",
    "VisualList",
    "diff_snapshots",
]
