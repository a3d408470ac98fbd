"""Selection of the latest tracked commit for a file."""

from __future__ import annotations

import functools
import logging
import re
from collections.abc import Sequence

from lunaria_core.config.models import TrackingRules
from lunaria_core.errors import MalformedDirectiveError
from lunaria_core.tracking.directives import parse_directive
from lunaria_core.vcs.models import CommitRecord

logger = logging.getLogger(__name__)


@functools.lru_cache(maxsize=32)
def _ignored_keywords_re(keywords: tuple[str, ...]) -> re.Pattern[str] | None:
    """Case-insensitive alternation of all ignored keywords, or None if empty."""
    if not keywords:
        return None
    return re.compile(f"({'|'.join(keywords)})", re.IGNORECASE)


def is_tracked(
    commit: CommitRecord, path: str, keywords_re: re.Pattern[str] | None
) -> bool:
    """Apply the keyword veto, then the commit's directive, to one commit."""
    # Ignored keywords take precedence over tracker directives.
    if keywords_re is not None and keywords_re.search(commit.message):
        logger.debug("Skipping %s for %s: ignored keyword", commit.hash[:7], path)
        return False

    try:
        directive = parse_directive(commit.body)
    except MalformedDirectiveError as e:
        logger.debug("Treating %s as undirected: %s", commit.hash[:7], e)
        return True

    if directive is None:
        return True

    tracked = directive.tracks(path)
    if not tracked:
        logger.debug("Skipping %s for %s: %s directive", commit.hash[:7], path, directive.kind.value)
    return tracked


def find_latest_tracked_commit(
    rules: TrackingRules,
    path: str,
    commits: Sequence[CommitRecord],
) -> CommitRecord | None:
    """Find the newest commit in *commits* that Lunaria tracks for *path*.

    Commits are expected newest first. A commit is skipped when its subject
    matches an ignored keyword, or when its body carries a directive that
    excludes *path*. Returns None when every commit was skipped.
    """
    keywords_re = _ignored_keywords_re(tuple(rules.ignored_keywords))
    return next((c for c in commits if is_tracked(c, path, keywords_re)), None)
