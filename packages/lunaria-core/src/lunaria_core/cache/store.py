"""File-based cache storage addressed by (domain, fingerprint)."""

from __future__ import annotations

import hashlib
import json
import logging
import os
import tempfile
from pathlib import Path

from lunaria_core.config.models import LunariaConfig

logger = logging.getLogger(__name__)

# Configuration fields that decide which commits are tracked. Changing any
# of them invalidates every cached checkpoint.
_FINGERPRINT_FIELDS = {"default_locale", "locales", "files", "tracking"}


def compute_config_fingerprint(config: LunariaConfig) -> str:
    """SHA-256 of the tracking-relevant parts of *config*."""
    data = config.model_dump(mode="json", include=_FINGERPRINT_FIELDS)
    canonical = json.dumps(data, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode()).hexdigest()


class CacheStore:
    """Stores one JSON blob per cache domain inside *cache_dir*.

    Each file has the shape ``{"hash": <fingerprint>, "contents": {...}}``.
    Contents written under a different fingerprint are never returned.
    """

    def __init__(self, cache_dir: str | Path) -> None:
        self.cache_dir = Path(cache_dir)

    def path_for(self, domain: str) -> Path:
        safe = domain.replace("..", "_").replace("/", "_").replace("\\", "_")
        return self.cache_dir / f"{safe}.json"

    def read(self, domain: str, fingerprint: str) -> dict[str, str]:
        """Return the cached contents, or an empty mapping if unusable."""
        path = self.path_for(domain)
        if not path.is_file():
            logger.info("No %s cache found at %s", domain, path)
            return {}

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Failed to read cache %s: %s, treating as empty", path, e)
            return {}

        if not isinstance(data, dict) or data.get("hash") != fingerprint:
            logger.info("Configuration changed since the %s cache was written, discarding it", domain)
            return {}

        contents = data.get("contents")
        if not isinstance(contents, dict):
            logger.warning("Cache %s has no usable contents, treating as empty", path)
            return {}
        return {str(k): str(v) for k, v in contents.items()}

    def write(self, domain: str, fingerprint: str, contents: dict[str, str]) -> Path:
        """Replace the domain's cache file atomically."""
        path = self.path_for(domain)
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps({"hash": fingerprint, "contents": contents}, indent=2, sort_keys=True)

        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        return path
