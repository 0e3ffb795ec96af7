"""Rule-based transaction categorization.

:func:`categorize` is pure: the same description, amount and table always
produce the same :class:`~personal_finance.models.Classification`.
"""

from __future__ import annotations

from .keywords import DEFAULT_KEYWORD_TABLE, KeywordTable
from .models import Classification, TransactionType


def transaction_type(amount: float) -> TransactionType:
    """Income for zero or positive amounts, expense for negative ones.

    Must be given the signed value, before it is reduced to a magnitude.
    """

    return TransactionType.INCOME if amount >= 0 else TransactionType.EXPENSE


def categorize(
    description: str,
    amount: float,
    *,
    table: KeywordTable = DEFAULT_KEYWORD_TABLE,
) -> Classification:
    """Assign a type and category to a statement line.

    Rules for the selected type are tried in table order; the first rule with a
    keyword contained in the lower-cased description wins. Without a match the
    table's fallback category (``other``) is used.
    """

    tx_type = transaction_type(amount)
    lowered = description.lower()
    for rule in table.rules_for(tx_type):
        if rule.matches(lowered):
            return Classification(type=tx_type, category=rule.category)
    return Classification(type=tx_type, category=table.fallback_category)


__all__ = ["categorize", "transaction_type"]
