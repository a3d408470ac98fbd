"""Checkpoint cache for tracked commits."""

from lunaria_core.cache.change_cache import GIT_DOMAIN, ChangeCache
from lunaria_core.cache.store import CacheStore, compute_config_fingerprint

__all__ = [
    "GIT_DOMAIN",
    "CacheStore",
    "ChangeCache",
    "compute_config_fingerprint",
]
