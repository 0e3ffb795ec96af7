"""Data models for ``personal_finance``.

Every record here is an immutable value. Transactions are created once by the
statement parser and afterwards only appended to a store or filtered out of a
view; aggregate views are recomputed on demand and never stored.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

ALL = "all"
"""Sentinel used by :class:`FilterCriteria` to disable a filter dimension."""


class TransactionType(str, Enum):
    """Direction of a transaction, derived from the sign of the parsed amount."""

    INCOME = "income"
    EXPENSE = "expense"


# ---------------------------------------------------------------------------
# Core record
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Transaction:
    """A single normalized statement line.

    Attributes
    ----------
    id:
        Unique within a store; built from the source name, the line position
        and the ingestion time/batch (see :mod:`personal_finance.parser`).
    date:
        Raw ``DD/MM/YYYY`` string as found in the statement. Not validated.
    description:
        Trimmed label with its original casing.
    amount:
        Non-negative magnitude. Direction lives in ``type``.
    type:
        :class:`TransactionType`.
    category:
        Category tag valid for ``type`` in the keyword table used at parse time.
    source:
        Originating file name; informational only.
    """

    id: str
    date: str
    description: str
    amount: float
    type: TransactionType
    category: str
    source: str

    @property
    def signed_amount(self) -> float:
        return self.amount if self.type is TransactionType.INCOME else -self.amount


@dataclass(frozen=True, slots=True)
class Classification:
    """Result of categorizing a description/amount pair."""

    type: TransactionType
    category: str


# ---------------------------------------------------------------------------
# Parse diagnostics
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SkippedLine:
    """A non-blank statement line that did not produce a transaction.

    ``line_number`` is 1-based over the physical lines of the content.
    ``reason`` is one of ``too_few_fields``, ``invalid_amount`` or
    ``empty_description``.
    """

    line_number: int
    text: str
    reason: str


@dataclass(frozen=True, slots=True)
class ParseResult:
    transactions: tuple[Transaction, ...] = ()
    skipped: tuple[SkippedLine, ...] = ()


@dataclass(frozen=True, slots=True)
class IngestReport:
    """Outcome of ingesting one file into a session.

    Exactly one of ``added`` (possibly empty) or ``error`` is meaningful: when
    ``error`` is set the store was left untouched for this file.
    """

    source: str
    added: tuple[Transaction, ...] = ()
    skipped: tuple[SkippedLine, ...] = ()
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


# ---------------------------------------------------------------------------
# Filtering
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FilterCriteria:
    """View criteria: ``month`` is ``"all"`` or ``"MM/YYYY"``; ``category`` is
    ``"all"`` or a category tag."""

    month: str = ALL
    category: str = ALL


# ---------------------------------------------------------------------------
# Aggregate views
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Totals:
    income: float = 0.0
    expense: float = 0.0
    income_count: int = 0
    expense_count: int = 0

    @property
    def balance(self) -> float:
        return self.income - self.expense


@dataclass(frozen=True, slots=True)
class MonthlySummary:
    """Income and expense sums for one ``MM/YYYY`` month key."""

    month: str
    income: float = 0.0
    expense: float = 0.0

    @property
    def balance(self) -> float:
        return self.income - self.expense


@dataclass(frozen=True, slots=True)
class CategorySlice:
    name: str
    value: float
    color: str


@dataclass(frozen=True, slots=True)
class TrendRow:
    category: str
    by_month: tuple[float, ...]

    @property
    def total(self) -> float:
        return sum(self.by_month)


@dataclass(frozen=True, slots=True)
class TrendTable:
    """Expense totals by category (rows) by month key (columns, oldest first)."""

    months: tuple[str, ...] = ()
    rows: tuple[TrendRow, ...] = ()

    def month_totals(self) -> tuple[float, ...]:
        return tuple(sum(row.by_month[i] for row in self.rows) for i in range(len(self.months)))

    @property
    def total(self) -> float:
        return sum(row.total for row in self.rows)


@dataclass(frozen=True, slots=True)
class DashboardSummary:
    """Everything a presentation layer needs for one filtered view.

    ``months`` and ``available_categories`` are filter choices computed over the whole
    store; every other field reflects the filtered subset only.
    """

    criteria: FilterCriteria
    totals: Totals
    categories: tuple[CategorySlice, ...] = ()
    top_categories: tuple[CategorySlice, ...] = ()
    timeline: tuple[MonthlySummary, ...] = ()
    transactions: tuple[Transaction, ...] = ()
    months: tuple[str, ...] = ()
    available_categories: tuple[str, ...] = ()


__all__ = [
    "ALL",
    "CategorySlice",
    "Classification",
    "DashboardSummary",
    "FilterCriteria",
    "IngestReport",
    "MonthlySummary",
    "ParseResult",
    "SkippedLine",
    "Totals",
    "TrendRow",
    "TrendTable",
    "Transaction",
    "TransactionType",
]
