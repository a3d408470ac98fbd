"""YAML/JSON config loading with env var expansion."""

import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from lunaria_core.errors import ConfigError

from .models import LunariaConfig


def load_config(cli_path: str | None = None) -> LunariaConfig:
    """Load config with resolution order: CLI > project-local > user-global > defaults.

    JSON config files are read through the YAML parser, since JSON is a
    subset of YAML.
    """
    config_paths = [
        Path(cli_path) if cli_path else None,
        Path("./lunaria.yaml"),
        Path("./lunaria.config.json"),
        Path.home() / ".lunaria" / "config.yaml",
    ]

    if cli_path and not Path(cli_path).exists():
        raise ConfigError(f"Config file not found: {cli_path}")

    for path in config_paths:
        if path and path.exists():
            try:
                with open(path, encoding="utf-8") as f:
                    raw = yaml.safe_load(f)
                if raw is None:
                    continue
                raw = _expand_env_vars(raw)
                return LunariaConfig(**raw)
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {path}: {e}") from e
            except ValidationError as e:
                raise ConfigError(f"Invalid config in {path}: {e}") from e
            except TypeError as e:
                raise ConfigError(f"Invalid config in {path}: expected a mapping") from e

    return LunariaConfig()


def _expand_env_vars(obj: object) -> object:
    """Recursively expand ${VAR} references in strings."""
    if isinstance(obj, str):
        return re.sub(r"\$\{(\w+)\}", lambda m: os.environ.get(m.group(1), ""), obj)
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


# Default YAML template for `lunaria config init`
DEFAULT_CONFIG_TEMPLATE = """\
# lunaria.yaml

# Source locale
default_locale:
  label: "English"
  lang: "en"

# Translated locales
locales:
  - label: "Português"
    lang: "pt"

# Files to track (globs relative to the project root)
files:
  - location: "docs/**/*.{md,mdx}"
    # ignore: ["docs/drafts/**"]

# Commits whose subject matches any of these are never tracked
tracking:
  ignored_keywords:
    - "lunaria-ignore"
    - "fix typo"
    - "en-only"
    - "broken link"
    - "i18nready"
    - "i18n ready"

# Cache of the last tracked commit per file
cache_dir: ".lunaria/cache"

# Concurrent git processes (2-32, defaults to the CPU count)
# max_concurrent_processes: 8
git_timeout: 60

# Logging
log_level: "info"              # debug | info | warn | error
log_format: "text"             # text | json
"""
