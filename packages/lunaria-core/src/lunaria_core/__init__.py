"""Lunaria Core - git history walking, commit tracking and checkpoint caching."""

from lunaria_core.cache import CacheStore, ChangeCache, compute_config_fingerprint
from lunaria_core.config import LunariaConfig, TrackingRules, load_config
from lunaria_core.errors import (
    BackendUnavailableError,
    ConfigError,
    LunariaError,
    MalformedDirectiveError,
    NoHistoryError,
)
from lunaria_core.freshness import FreshnessTracker, collect_tracked_files
from lunaria_core.tracking import find_latest_tracked_commit, parse_directive
from lunaria_core.vcs import (
    CommitRecord,
    GitBackend,
    HistoryBackend,
    HistoryWalker,
    ResolutionResult,
)

__version__ = "0.1.0"

__all__ = [
    "BackendUnavailableError",
    "CacheStore",
    "ChangeCache",
    "CommitRecord",
    "ConfigError",
    "FreshnessTracker",
    "GitBackend",
    "HistoryBackend",
    "HistoryWalker",
    "LunariaConfig",
    "LunariaError",
    "MalformedDirectiveError",
    "NoHistoryError",
    "ResolutionResult",
    "TrackingRules",
    "collect_tracked_files",
    "compute_config_fingerprint",
    "find_latest_tracked_commit",
    "load_config",
    "parse_directive",
]
