"""History walker: per-file commit history, optionally bounded by a checkpoint."""

from __future__ import annotations

import logging

from lunaria_core.errors import NoHistoryError
from lunaria_core.vcs.base import HistoryBackend
from lunaria_core.vcs.models import CommitRecord

logger = logging.getLogger(__name__)


class HistoryWalker:
    """Queries a HistoryBackend for the commits touching a single file."""

    def __init__(self, backend: HistoryBackend) -> None:
        self.backend = backend

    async def get_history(self, path: str, since: str | None = None) -> list[CommitRecord]:
        """Return the commits touching *path*, newest first.

        With *since*, only commits strictly after that commit are returned and
        the result may be empty. Without it, an empty history means the file
        was never committed and NoHistoryError is raised.
        """
        commits = await self.backend.log(path, since=since)
        if since is None and not commits:
            raise NoHistoryError(path)
        return commits

    async def get_checkpoint(self, commit_hash: str) -> CommitRecord | None:
        """Fetch a cached checkpoint commit, or None if it can't be reused."""
        commit = await self.backend.get_commit(commit_hash)
        if commit is None:
            logger.warning(
                "Checkpoint %s is no longer reachable from HEAD, walking full history",
                commit_hash,
            )
        return commit
