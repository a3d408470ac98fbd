"""Freshness tracking: latest tracked change per file."""

from lunaria_core.freshness.tracker import FreshnessTracker, collect_tracked_files

__all__ = [
    "FreshnessTracker",
    "collect_tracked_files",
]
