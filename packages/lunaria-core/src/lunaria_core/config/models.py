import re
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_IGNORED_KEYWORDS = [
    "lunaria-ignore",
    "fix typo",
    "en-only",
    "broken link",
    "i18nready",
    "i18n ready",
]


class LocaleConfig(BaseModel):
    label: str = Field(min_length=1)
    lang: str = Field(min_length=1)

    @field_validator("lang")
    @classmethod
    def validate_lang(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("lang cannot be empty or whitespace")
        return v


class FileConfig(BaseModel):
    location: str = Field(min_length=1, description="Glob of files to track, relative to the project root")
    ignore: list[str] = Field(default_factory=list)


class TrackingRules(BaseModel):
    ignored_keywords: list[str] = Field(default_factory=lambda: list(DEFAULT_IGNORED_KEYWORDS))

    @field_validator("ignored_keywords")
    @classmethod
    def validate_keywords(cls, v: list[str]) -> list[str]:
        for keyword in v:
            if not keyword:
                raise ValueError("ignored keywords cannot be empty")
            try:
                re.compile(keyword)
            except re.error as e:
                raise ValueError(f"ignored keyword {keyword!r} is not a valid pattern: {e}") from e
        return v


class LunariaConfig(BaseModel):
    default_locale: LocaleConfig = Field(
        default_factory=lambda: LocaleConfig(label="English", lang="en")
    )
    locales: list[LocaleConfig] = Field(default_factory=list)
    files: list[FileConfig] = Field(default_factory=list)
    tracking: TrackingRules = Field(default_factory=TrackingRules)
    cache_dir: str = ".lunaria/cache"
    max_concurrent_processes: int | None = Field(default=None, ge=2, le=32)
    git_timeout: int = Field(default=60, gt=0)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"

    @model_validator(mode="after")
    def validate_locales(self) -> "LunariaConfig":
        langs = [locale.lang for locale in self.locales]
        if len(langs) != len(set(langs)):
            raise ValueError("locales must have unique lang values")
        if self.default_locale.lang in langs:
            raise ValueError(
                f"default locale {self.default_locale.lang!r} must not be repeated in locales"
            )
        return self
