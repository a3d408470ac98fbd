from .loader import load_config
from .models import (
    DEFAULT_IGNORED_KEYWORDS,
    FileConfig,
    LocaleConfig,
    LunariaConfig,
    TrackingRules,
)

__all__ = [
    "DEFAULT_IGNORED_KEYWORDS",
    "FileConfig",
    "LocaleConfig",
    "LunariaConfig",
    "TrackingRules",
    "load_config",
]
