"""Abstract version-control interface for Lunaria."""

from abc import ABC, abstractmethod

from lunaria_core.vcs.models import CommitRecord


class HistoryBackend(ABC):
    """Abstract base class for version-control backends.

    Only per-file history is needed: commit hash, author date, subject and
    body. Diffs, blame and branches are out of reach on purpose.
    """

    @abstractmethod
    async def log(self, path: str, since: str | None = None) -> list[CommitRecord]:
        """List commits touching *path*, newest first.

        Args:
            path: File path relative to the repository root.
            since: Optional commit hash. Only commits strictly after it are
                returned.
        """
        ...

    @abstractmethod
    async def get_commit(self, commit_hash: str) -> CommitRecord | None:
        """Fetch one commit reachable from the current head.

        Returns None when the hash is unknown or not an ancestor of the head.
        """
        ...
