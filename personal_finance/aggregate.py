"""Aggregations over an (already filtered) transaction sequence.

All functions are pure and total: an empty input yields zero totals and empty
collections, never an error.

Month keys are taken verbatim from characters 3..10 of the date, which is the
``MM/YYYY`` part of a ``DD/MM/YYYY`` string. Dates in any other shape are not
rejected; they simply produce odd keys. Such keys (and dates) sort after all
well-formed ones.
"""

from __future__ import annotations

from collections.abc import Iterable

from .keywords import category_color
from .models import (
    CategorySlice,
    MonthlySummary,
    Totals,
    Transaction,
    TransactionType,
    TrendRow,
    TrendTable,
)

DEFAULT_TOP_CATEGORIES = 5


# ---------------------------------------------------------------------------
# Keys
# ---------------------------------------------------------------------------


def month_key(date: str) -> str:
    """``"05/02/2024"`` → ``"02/2024"``."""

    return date[3:10]


def _split_numbers(text: str, expected: int) -> tuple[int, ...] | None:
    pieces = text.split("/")
    if len(pieces) != expected:
        return None
    if not all(p.isascii() and p.isdigit() for p in pieces):
        return None
    return tuple(int(p) for p in pieces)


def month_sort_key(key: str) -> tuple[int, int, int, str]:
    """Ascending chronological key for ``MM/YYYY``: ``(YYYY, MM)``."""

    parsed = _split_numbers(key, 2)
    if parsed is None:
        return (1, 0, 0, key)
    month, year = parsed
    return (0, year, month, "")


def _newest_first_key(date: str) -> tuple[int, int, int, int]:
    parsed = _split_numbers(date, 3)
    if parsed is None:
        return (1, 0, 0, 0)
    day, month, year = parsed
    return (0, -year, -month, -day)


# ---------------------------------------------------------------------------
# Totals
# ---------------------------------------------------------------------------


def compute_totals(transactions: Iterable[Transaction]) -> Totals:
    income = expense = 0.0
    income_count = expense_count = 0
    for tx in transactions:
        if tx.type is TransactionType.INCOME:
            income += tx.amount
            income_count += 1
        else:
            expense += tx.amount
            expense_count += 1
    return Totals(
        income=income,
        expense=expense,
        income_count=income_count,
        expense_count=expense_count,
    )


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------


def category_totals(transactions: Iterable[Transaction]) -> dict[str, float]:
    """Sum of ``amount`` per category, in first-seen order.

    Income and expense transactions feed the same mapping, keyed only by the
    category name; an ``other`` income and an ``other`` expense add up.
    """

    totals: dict[str, float] = {}
    for tx in transactions:
        totals[tx.category] = totals.get(tx.category, 0.0) + tx.amount
    return totals


def category_breakdown(transactions: Iterable[Transaction]) -> list[CategorySlice]:
    return [
        CategorySlice(name=name, value=value, color=category_color(name))
        for name, value in category_totals(transactions).items()
    ]


def expense_category_breakdown(transactions: Iterable[Transaction]) -> list[CategorySlice]:
    """Breakdown limited to categories with at least one expense transaction."""

    txs = list(transactions)
    expense_categories = {tx.category for tx in txs if tx.type is TransactionType.EXPENSE}
    return [s for s in category_breakdown(txs) if s.name in expense_categories]


def top_expense_categories(
    transactions: Iterable[Transaction], limit: int = DEFAULT_TOP_CATEGORIES
) -> list[CategorySlice]:
    """Largest expense categories first; ties keep first-seen order."""

    ranked = sorted(expense_category_breakdown(transactions), key=lambda s: s.value, reverse=True)
    return ranked[:limit]


# ---------------------------------------------------------------------------
# Time series
# ---------------------------------------------------------------------------


def monthly_totals(transactions: Iterable[Transaction]) -> dict[str, MonthlySummary]:
    """Income and expense sums per month key, in first-seen order."""

    sums: dict[str, list[float]] = {}
    for tx in transactions:
        acc = sums.setdefault(month_key(tx.date), [0.0, 0.0])
        if tx.type is TransactionType.INCOME:
            acc[0] += tx.amount
        else:
            acc[1] += tx.amount
    return {
        key: MonthlySummary(month=key, income=income, expense=expense)
        for key, (income, expense) in sums.items()
    }


def monthly_series(transactions: Iterable[Transaction]) -> list[MonthlySummary]:
    """Monthly sums ordered oldest month first."""

    by_month = monthly_totals(transactions)
    return [by_month[key] for key in sorted(by_month, key=month_sort_key)]


def sort_newest_first(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Order by ``(YYYY, MM, DD)`` descending; same-day items keep input order."""

    return sorted(transactions, key=lambda tx: _newest_first_key(tx.date))


def expense_trends(transactions: Iterable[Transaction]) -> TrendTable:
    """Pivot expense amounts into categories × months (oldest month first)."""

    expenses = [tx for tx in transactions if tx.type is TransactionType.EXPENSE]
    months = sorted({month_key(tx.date) for tx in expenses}, key=month_sort_key)
    column = {m: i for i, m in enumerate(months)}

    cells: dict[str, list[float]] = {}
    for tx in expenses:
        row = cells.setdefault(tx.category, [0.0] * len(months))
        row[column[month_key(tx.date)]] += tx.amount

    rows = sorted(
        (TrendRow(category=name, by_month=tuple(values)) for name, values in cells.items()),
        key=lambda r: r.total,
        reverse=True,
    )
    return TrendTable(months=tuple(months), rows=tuple(rows))


__all__ = [
    "DEFAULT_TOP_CATEGORIES",
    "category_breakdown",
    "category_totals",
    "compute_totals",
    "expense_category_breakdown",
    "expense_trends",
    "month_key",
    "month_sort_key",
    "monthly_series",
    "monthly_totals",
    "sort_newest_first",
    "top_expense_categories",
]
