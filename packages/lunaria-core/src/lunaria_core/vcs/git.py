"""Git history backend that shells out to the git executable."""

from __future__ import annotations

import asyncio
import logging
import os
import re
import subprocess
from datetime import datetime
from pathlib import Path

from lunaria_core.errors import BackendUnavailableError
from lunaria_core.vcs.base import HistoryBackend
from lunaria_core.vcs.models import CommitRecord

logger = logging.getLogger(__name__)

MIN_PROCESSES = 2
MAX_PROCESSES = 32

_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"
# hash, strict ISO author date, subject, body
_LOG_FORMAT = "%H%x1f%aI%x1f%s%x1f%b%x1e"

_HASH_RE = re.compile(r"[0-9a-fA-F]{4,64}")


def default_process_limit() -> int:
    """Concurrent git processes to allow: the CPU count, clamped to [2, 32]."""
    return max(MIN_PROCESSES, min(MAX_PROCESSES, os.cpu_count() or MIN_PROCESSES))


def parse_log_output(raw: str) -> list[CommitRecord]:
    """Parse the output of ``git log`` run with the module's format string."""
    commits: list[CommitRecord] = []
    for chunk in raw.split(_RECORD_SEP):
        chunk = chunk.lstrip("\n")
        if not chunk.strip():
            continue
        parts = chunk.split(_FIELD_SEP, 3)
        if len(parts) != 4:
            raise BackendUnavailableError("log", f"unexpected output: {chunk[:80]!r}")
        commit_hash, date, subject, body = parts
        commits.append(CommitRecord(
            hash=commit_hash,
            date=datetime.fromisoformat(date),
            message=subject,
            body=body.strip(),
        ))
    return commits


def _failure_detail(result: subprocess.CompletedProcess) -> str:
    return result.stderr.strip() or f"exited with code {result.returncode}"


class GitBackend(HistoryBackend):
    """HistoryBackend backed by the ``git`` command line.

    subprocess.run is blocking, so every call is wrapped with
    asyncio.to_thread() and gated by a semaphore that bounds the number of
    git processes alive at once.
    """

    def __init__(
        self,
        root: str | Path = ".",
        max_concurrent_processes: int | None = None,
        timeout: int = 60,
    ) -> None:
        self.root = Path(root).resolve()
        limit = max_concurrent_processes or default_process_limit()
        self.max_concurrent_processes = max(MIN_PROCESSES, min(MAX_PROCESSES, limit))
        self.timeout = timeout
        self._semaphore = asyncio.Semaphore(self.max_concurrent_processes)

    # ------------------------------------------------------------------
    # Process handling
    # ------------------------------------------------------------------

    def _run_sync(self, operation: str, args: list[str], check: bool) -> subprocess.CompletedProcess:
        try:
            result = subprocess.run(
                # Paths are file names, never pathspec patterns or magic.
                ["git", "--literal-pathspecs", *args],
                cwd=self.root,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise BackendUnavailableError(operation, f"timed out after {self.timeout}s", e) from e
        except OSError as e:
            raise BackendUnavailableError(operation, str(e), e) from e

        if check and result.returncode != 0:
            raise BackendUnavailableError(operation, _failure_detail(result))
        return result

    async def _run(
        self, operation: str, args: list[str], check: bool = True
    ) -> subprocess.CompletedProcess:
        async with self._semaphore:
            return await asyncio.to_thread(self._run_sync, operation, args, check)

    # ------------------------------------------------------------------
    # HistoryBackend
    # ------------------------------------------------------------------

    async def log(self, path: str, since: str | None = None) -> list[CommitRecord]:
        args = ["log", f"--format={_LOG_FORMAT}"]
        if since is not None:
            args.append(f"{since}..HEAD")
        args += ["--", path]
        result = await self._run("log", args, check=False)
        if result.returncode != 0:
            if await self._has_no_history(path):
                logger.debug("git log %s failed, file has no history: %s", path, _failure_detail(result))
                return []
            raise BackendUnavailableError("log", _failure_detail(result))
        commits = parse_log_output(result.stdout)
        logger.debug("git log %s (since %s): %d commits", path, since, len(commits))
        return commits

    async def _has_no_history(self, path: str) -> bool:
        """Whether a failed log means *path* simply has no commits.

        True for a repository without commits yet and for paths outside the
        work tree. Anything else (not a repository, bad revision) is a
        backend failure.
        """
        head = await self._run("rev-parse", ["rev-parse", "--verify", "-q", "HEAD"], check=False)
        if head.returncode == 1:
            return True
        if head.returncode != 0:
            return False

        toplevel = await self._run("rev-parse", ["rev-parse", "--show-toplevel"], check=False)
        if toplevel.returncode != 0:
            return False
        work_tree = Path(toplevel.stdout.strip()).resolve()
        return not (self.root / path).resolve().is_relative_to(work_tree)

    async def get_commit(self, commit_hash: str) -> CommitRecord | None:
        if not _HASH_RE.fullmatch(commit_hash):
            return None

        ancestor = await self._run(
            "merge-base", ["merge-base", "--is-ancestor", commit_hash, "HEAD"], check=False
        )
        if ancestor.returncode != 0:
            return None

        result = await self._run("log", ["log", "-1", f"--format={_LOG_FORMAT}", commit_hash])
        commits = parse_log_output(result.stdout)
        return commits[0] if commits else None
