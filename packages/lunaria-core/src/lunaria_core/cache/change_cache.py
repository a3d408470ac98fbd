"""Per-file checkpoint cache shared by concurrent resolutions."""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from lunaria_core.cache.store import CacheStore

logger = logging.getLogger(__name__)

GIT_DOMAIN = "git"


class ChangeCache:
    """Owns the path -> last tracked commit hash mapping.

    The mapping is loaded once, updated in memory as files resolve, and
    written back by flush(). In force mode nothing is read and nothing is
    written, so every resolution walks the full history.
    """

    def __init__(
        self,
        store: CacheStore,
        fingerprint: str,
        domain: str = GIT_DOMAIN,
        force: bool = False,
    ) -> None:
        self._store = store
        self._fingerprint = fingerprint
        self._domain = domain
        self._force = force
        self._lock = threading.Lock()
        self._entries: dict[str, str] = {}

    @classmethod
    def open(
        cls,
        cache_dir: str | Path,
        fingerprint: str,
        domain: str = GIT_DOMAIN,
        force: bool = False,
    ) -> ChangeCache:
        """Create a cache over *cache_dir* and load it."""
        cache = cls(CacheStore(cache_dir), fingerprint, domain=domain, force=force)
        cache.load()
        return cache

    @property
    def force(self) -> bool:
        return self._force

    def load(self) -> dict[str, str]:
        """Read the persisted entries, replacing anything held in memory."""
        entries = {} if self._force else self._store.read(self._domain, self._fingerprint)
        with self._lock:
            self._entries = entries
        logger.debug("Loaded %d %s checkpoints", len(entries), self._domain)
        return dict(entries)

    def get(self, path: str) -> str | None:
        if self._force:
            return None
        with self._lock:
            return self._entries.get(path)

    def set(self, path: str, commit_hash: str) -> None:
        if self._force:
            return
        with self._lock:
            self._entries[path] = commit_hash

    def snapshot(self) -> dict[str, str]:
        """Copy of the current entries."""
        with self._lock:
            return dict(self._entries)

    def flush(self) -> Path | None:
        """Persist every entry under the current fingerprint."""
        if self._force:
            return None
        path = self._store.write(self._domain, self._fingerprint, self.snapshot())
        logger.debug("Wrote %s cache to %s", self._domain, path)
        return path
