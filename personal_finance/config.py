"""Environment-driven settings.

Variables (a local ``.env`` is loaded by the CLI before these are read):

- ``PF_KEYWORDS_FILE``: JSON keyword table replacing the built-in one.
- ``PF_TOP_CATEGORIES``: how many categories the "top" view shows (default 5).
- ``PF_ACCEPTED_EXTENSIONS``: comma-separated statement file extensions
  (default ``.csv,.txt``).
- ``PERSONAL_FINANCE_LOG_LEVEL``: read by :mod:`personal_finance.logging_setup`.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .aggregate import DEFAULT_TOP_CATEGORIES
from .errors import ConfigurationError
from .keywords import DEFAULT_KEYWORD_TABLE, KeywordTable, load_keyword_table

KEYWORDS_FILE_ENV = "PF_KEYWORDS_FILE"
TOP_CATEGORIES_ENV = "PF_TOP_CATEGORIES"
ACCEPTED_EXTENSIONS_ENV = "PF_ACCEPTED_EXTENSIONS"

ACCEPTED_EXTENSIONS: tuple[str, ...] = (".csv", ".txt")


def normalize_extension(ext: str) -> str:
    """``" CSV "`` → ``".csv"``."""

    ext = ext.strip().lower()
    return ext if ext.startswith(".") else f".{ext}"


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    keywords_file: Path | None = None
    top_categories: int = Field(default=DEFAULT_TOP_CATEGORIES, gt=0)
    accepted_extensions: tuple[str, ...] = ACCEPTED_EXTENSIONS

    @field_validator("accepted_extensions")
    @classmethod
    def _normalize_extensions(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        items = tuple(normalize_extension(ext) for ext in v if ext.strip())
        if not items:
            raise ValueError("at least one accepted extension is required")
        return items

    def keyword_table(self) -> KeywordTable:
        """The configured keyword table, or the built-in default."""

        if self.keywords_file is None:
            return DEFAULT_KEYWORD_TABLE
        return load_keyword_table(self.keywords_file)


def load_settings(env: Mapping[str, str] | None = None, **overrides: object) -> Settings:
    """Build :class:`Settings` from ``env`` (defaults to ``os.environ``).

    Keyword ``overrides`` whose value is not ``None`` win over the environment
    (the CLI passes its options this way).
    """

    source = os.environ if env is None else env
    values: dict[str, object] = {}

    keywords_file = (source.get(KEYWORDS_FILE_ENV) or "").strip()
    if keywords_file:
        values["keywords_file"] = keywords_file
    top = (source.get(TOP_CATEGORIES_ENV) or "").strip()
    if top:
        values["top_categories"] = top
    extensions = (source.get(ACCEPTED_EXTENSIONS_ENV) or "").strip()
    if extensions:
        values["accepted_extensions"] = tuple(extensions.split(","))

    values.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return Settings.model_validate(values)
    except ValidationError as exc:
        raise ConfigurationError(f"invalid settings: {exc}") from exc


__all__ = ["ACCEPTED_EXTENSIONS", "Settings", "load_settings", "normalize_extension"]
