"""Exceptions raised at the ingestion boundary and by configuration loading.

Per-line parse problems never raise; they are dropped (and reported as
:class:`~personal_finance.models.SkippedLine` diagnostics).
"""

from __future__ import annotations


class PersonalFinanceError(Exception):
    """Base exception for the ``personal_finance`` package."""


class IngestionError(PersonalFinanceError):
    """A statement file could not be read or accepted."""


class UnsupportedFileError(IngestionError, ValueError):
    """The file name does not carry an accepted statement extension."""


class ConfigurationError(PersonalFinanceError, ValueError):
    """Settings from the environment failed validation."""


class KeywordTableError(PersonalFinanceError, ValueError):
    """A keyword table file is missing, unreadable, or fails validation."""


__all__ = [
    "ConfigurationError",
    "IngestionError",
    "KeywordTableError",
    "PersonalFinanceError",
    "UnsupportedFileError",
]
