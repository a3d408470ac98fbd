"""Tracker directives embedded in commit bodies."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from wcmatch import glob as wcglob

from lunaria_core.errors import MalformedDirectiveError

# Matches a `@lunaria-track` or `@lunaria-ignore` group followed by a
# sequence of paths separated by semicolons, up to the end of the line.
# Only the first occurrence in a body is ever considered.
DIRECTIVE_RE = re.compile(
    r"(?P<directive>@lunaria-track|@lunaria-ignore):(?P<paths_or_globs>[^\n]+)?"
)

# Shell-style globs with `**`, `{a,b}` groups, extglobs such as `+(a|b)`
# and leading `!` negation. A lone negated pattern matches everything else.
GLOB_FLAGS = (
    wcglob.GLOBSTAR | wcglob.BRACE | wcglob.EXTGLOB | wcglob.NEGATE | wcglob.NEGATEALL
)


class DirectiveKind(str, Enum):
    TRACK = "@lunaria-track"
    IGNORE = "@lunaria-ignore"


def path_matches(path: str, pattern: str) -> bool:
    """Whether *path* matches a single path or glob."""
    return wcglob.globmatch(path, pattern, flags=GLOB_FLAGS)


@dataclass(frozen=True)
class Directive:
    """A parsed `@lunaria-track` / `@lunaria-ignore` directive."""

    kind: DirectiveKind
    targets: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.targets:
            raise MalformedDirectiveError(f"{self.kind.value} directive has no paths")

    def matches(self, path: str) -> bool:
        """True if any target matches *path*."""
        return any(path_matches(path, target) for target in self.targets)

    def tracks(self, path: str) -> bool:
        """Whether a commit carrying this directive counts for *path*.

        Track directives need at least one matching target, ignore
        directives need none.
        """
        if self.kind is DirectiveKind.TRACK:
            return self.matches(path)
        return not self.matches(path)


def parse_directive(body: str) -> Directive | None:
    """Extract the first directive from a commit body.

    Returns None when the body carries no directive. Raises
    MalformedDirectiveError when a directive is present without any
    usable path.
    """
    match = DIRECTIVE_RE.search(body)
    if match is None:
        return None

    raw = match.group("paths_or_globs") or ""
    targets = tuple(t.strip() for t in raw.split(";") if t.strip())
    return Directive(kind=DirectiveKind(match.group("directive")), targets=targets)
