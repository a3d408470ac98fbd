"""Commit tracking rules: ignored keywords and tracker directives."""

from lunaria_core.tracking.directives import (
    Directive,
    DirectiveKind,
    parse_directive,
    path_matches,
)
from lunaria_core.tracking.resolver import find_latest_tracked_commit, is_tracked

__all__ = [
    "Directive",
    "DirectiveKind",
    "find_latest_tracked_commit",
    "is_tracked",
    "parse_directive",
    "path_matches",
]
