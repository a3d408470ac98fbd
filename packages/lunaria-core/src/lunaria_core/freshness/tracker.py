"""Latest change / latest tracked change resolution for tracked files."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from pathlib import Path

from wcmatch import glob as wcglob

from lunaria_core.cache.change_cache import ChangeCache
from lunaria_core.config.models import LunariaConfig
from lunaria_core.tracking.directives import GLOB_FLAGS, path_matches
from lunaria_core.tracking.resolver import find_latest_tracked_commit
from lunaria_core.vcs.models import CommitRecord, ResolutionResult
from lunaria_core.vcs.walker import HistoryWalker

logger = logging.getLogger(__name__)


def collect_tracked_files(config: LunariaConfig, root: str | Path = ".") -> list[str]:
    """Expand every configured file location into repository-relative paths."""
    root = Path(root).resolve()
    found: set[str] = set()
    for entry in config.files:
        for match in wcglob.glob(entry.location, flags=GLOB_FLAGS, root_dir=str(root)):
            rel = Path(match).as_posix()
            if not (root / rel).is_file():
                continue
            if any(path_matches(rel, pattern) for pattern in entry.ignore):
                continue
            found.add(rel)
    return sorted(found)


class FreshnessTracker:
    """Resolves the latest and latest tracked change of each file.

    The checkpoint cache lets a resolution stop at the last tracked commit
    found by a previous run. Errors are raised to the caller, which decides
    whether to abort.
    """

    def __init__(
        self,
        config: LunariaConfig,
        walker: HistoryWalker,
        cache: ChangeCache,
    ) -> None:
        self.config = config
        self.walker = walker
        self.cache = cache

    async def _commits_for(self, path: str) -> list[CommitRecord]:
        checkpoint_hash = self.cache.get(path)
        checkpoint = None
        if checkpoint_hash is not None:
            checkpoint = await self.walker.get_checkpoint(checkpoint_hash)

        if checkpoint is None:
            return await self.walker.get_history(path)

        # Nothing older than the checkpoint can become tracked again, so the
        # checkpoint itself closes the sequence.
        newer = await self.walker.get_history(path, since=checkpoint.hash)
        return [*newer, checkpoint]

    async def get_file_latest_changes(self, path: str) -> ResolutionResult:
        """Resolve one file. Raises NoHistoryError or BackendUnavailableError."""
        commits = await self._commits_for(path)
        latest_change = commits[0]
        # Every change to the file may have been ignored on purpose, in
        # which case the latest change stands in for the tracked one.
        latest_tracked_change = (
            find_latest_tracked_commit(self.config.tracking, path, commits) or latest_change
        )
        self.cache.set(path, latest_tracked_change.hash)

        return ResolutionResult(
            latest_change=latest_change,
            latest_tracked_change=latest_tracked_change,
        )

    async def resolve_files(self, paths: Iterable[str]) -> dict[str, ResolutionResult]:
        """Resolve many files concurrently, failing fast on the first error."""
        paths = list(dict.fromkeys(paths))
        tasks = [asyncio.ensure_future(self.get_file_latest_changes(p)) for p in paths]
        try:
            results = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        logger.info("Resolved %d files", len(paths))
        return dict(zip(paths, results))
