"""Shared test fixtures for Lunaria."""

import os
import shutil
import subprocess
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from lunaria_core.config.models import FileConfig, LocaleConfig, LunariaConfig
from lunaria_core.vcs.base import HistoryBackend
from lunaria_core.vcs.models import CommitRecord


class FakeBackend(HistoryBackend):
    """In-memory HistoryBackend over fixed per-file histories (newest first)."""

    def __init__(self, histories: dict[str, list[CommitRecord]]) -> None:
        self.histories = histories
        self.log_calls: list[tuple[str, str | None]] = []

    async def log(self, path: str, since: str | None = None) -> list[CommitRecord]:
        self.log_calls.append((path, since))
        commits = list(self.histories.get(path, []))
        if since is None:
            return commits
        hashes = [c.hash for c in commits]
        if since in hashes:
            return commits[: hashes.index(since)]
        return commits

    async def get_commit(self, commit_hash: str) -> CommitRecord | None:
        for commits in self.histories.values():
            for commit in commits:
                if commit.hash == commit_hash:
                    return commit
        return None


class GitRepo:
    """A throwaway git repository for end-to-end tests."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self._env = {
            **os.environ,
            "GIT_AUTHOR_NAME": "Test Author",
            "GIT_AUTHOR_EMAIL": "author@example.com",
            "GIT_COMMITTER_NAME": "Test Author",
            "GIT_COMMITTER_EMAIL": "author@example.com",
        }
        self._clock = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)
        self.git("init", "-q")

    def git(self, *args: str) -> str:
        result = subprocess.run(
            ["git", "-c", "commit.gpgsign=false", *args],
            cwd=self.root,
            env=self._env,
            capture_output=True,
            text=True,
            check=True,
        )
        return result.stdout.strip()

    def write(self, rel: str, content: str) -> Path:
        path = self.root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    def commit(self, files: dict[str, str], subject: str, body: str = "") -> str:
        """Write *files*, commit them, and return the new commit hash."""
        for rel, content in files.items():
            self.write(rel, content)
        self.git("add", *files)
        # Distinct, increasing dates keep the log order deterministic.
        self._clock += timedelta(minutes=1)
        stamp = self._clock.isoformat()
        self._env["GIT_AUTHOR_DATE"] = stamp
        self._env["GIT_COMMITTER_DATE"] = stamp
        args = ["commit", "-q", "-m", subject]
        if body:
            args += ["-m", body]
        self.git(*args)
        return self.git("rev-parse", "HEAD")


@pytest.fixture
def make_commit():
    """Factory for CommitRecords with increasing author dates."""
    base = datetime(2024, 1, 1, tzinfo=UTC)
    counter = {"n": 0}

    def _make(commit_hash: str, message: str = "Update docs", body: str = "") -> CommitRecord:
        counter["n"] += 1
        return CommitRecord(
            hash=commit_hash,
            date=base + timedelta(hours=counter["n"]),
            message=message,
            body=body,
        )

    return _make


@pytest.fixture
def make_backend():
    return FakeBackend


@pytest.fixture
def git_repo(tmp_path):
    if shutil.which("git") is None:
        pytest.skip("git executable not available")
    root = tmp_path / "repo"
    root.mkdir()
    return GitRepo(root)


@pytest.fixture
def sample_config():
    return LunariaConfig(
        default_locale=LocaleConfig(label="English", lang="en"),
        locales=[LocaleConfig(label="Português", lang="pt")],
        files=[FileConfig(location="docs/**/*.md")],
    )
