"""Error types raised by the Lunaria core."""

from __future__ import annotations


class LunariaError(Exception):
    """Base class for every error the core raises."""


class ConfigError(LunariaError):
    """The configuration file could not be parsed or validated."""


class NoHistoryError(LunariaError):
    """A tracked file has no commits (uncommitted or outside the repository)."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(
            f"Failed to find the git history for {path!r}. "
            "Make sure the file is committed before tracking it."
        )


class BackendUnavailableError(LunariaError):
    """The version-control query itself failed."""

    def __init__(self, operation: str, detail: str, cause: Exception | None = None) -> None:
        self.operation = operation
        self.detail = detail
        super().__init__(f"git {operation} failed: {detail}")
        if cause is not None:
            self.__cause__ = cause


class MalformedDirectiveError(LunariaError, ValueError):
    """A tracker directive is present in a commit body but has no usable targets."""
