"""Filter engine: narrow a transaction sequence by month and category."""

from __future__ import annotations

from collections.abc import Iterable

from .aggregate import month_key, month_sort_key
from .models import ALL, FilterCriteria, Transaction


def matches(tx: Transaction, criteria: FilterCriteria) -> bool:
    # The month test is a substring match on the raw date, not a date comparison.
    month_ok = criteria.month == ALL or criteria.month in tx.date
    category_ok = criteria.category == ALL or criteria.category == tx.category
    return month_ok and category_ok


def filter_transactions(
    transactions: Iterable[Transaction], criteria: FilterCriteria
) -> list[Transaction]:
    """Return the transactions passing both filters, in input order."""

    return [tx for tx in transactions if matches(tx, criteria)]


def available_months(transactions: Iterable[Transaction]) -> list[str]:
    """Distinct month keys, oldest first."""

    return sorted({month_key(tx.date) for tx in transactions}, key=month_sort_key)


def available_categories(transactions: Iterable[Transaction]) -> list[str]:
    """Distinct categories in first-seen order."""

    return list(dict.fromkeys(tx.category for tx in transactions))


__all__ = [
    "available_categories",
    "available_months",
    "filter_transactions",
    "matches",
]
