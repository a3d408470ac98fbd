"""Version-control history for Lunaria."""

from lunaria_core.vcs.base import HistoryBackend
from lunaria_core.vcs.git import GitBackend, default_process_limit
from lunaria_core.vcs.models import CommitRecord, ResolutionResult, to_utc_string
from lunaria_core.vcs.walker import HistoryWalker

__all__ = [
    "CommitRecord",
    "GitBackend",
    "HistoryBackend",
    "HistoryWalker",
    "ResolutionResult",
    "default_process_limit",
    "to_utc_string",
]
