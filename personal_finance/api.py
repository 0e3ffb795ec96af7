"""Public API for the ``personal_finance`` package.

The pipeline is: statement bytes → :func:`ingest_statement` (parse and
categorize) → a store of transactions (see
:class:`~personal_finance.store.StatementSession`) → :func:`summarize` for one
filtered view, or :func:`report_trends` for a printable category-by-month
table.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import PurePath

from . import aggregate, filters
from .config import ACCEPTED_EXTENSIONS
from .keywords import DEFAULT_KEYWORD_TABLE, KeywordTable
from .models import DashboardSummary, FilterCriteria, ParseResult, Transaction
from .parser import decode_bytes, parse_statement_detailed
from .store import ensure_supported_file


def ingest_statement(
    data: bytes | str,
    filename: str,
    *,
    table: KeywordTable = DEFAULT_KEYWORD_TABLE,
    accepted_extensions: Sequence[str] = ACCEPTED_EXTENSIONS,
) -> ParseResult:
    """Parse one uploaded statement into transactions plus skipped-line diagnostics.

    Input
    -----
    data:
        Raw file bytes (decoded as UTF-8, falling back to cp1252, then Latin-1) or text.
    filename:
        Original file name; must end in one of ``accepted_extensions``
        (``.csv`` or ``.txt`` by default).

    The caller appends ``result.transactions`` to its store. Raises
    :class:`~personal_finance.errors.UnsupportedFileError` for other file names;
    malformed lines never raise.
    """

    ensure_supported_file(filename, accepted_extensions)
    content = decode_bytes(data) if isinstance(data, bytes) else data
    return parse_statement_detailed(content, PurePath(filename).name, table=table)


def summarize(
    transactions: Iterable[Transaction],
    criteria: FilterCriteria | None = None,
    *,
    top: int = aggregate.DEFAULT_TOP_CATEGORIES,
) -> DashboardSummary:
    """Filter ``transactions`` by ``criteria`` and compute every dashboard view.

    Output
    ------
    A :class:`~personal_finance.models.DashboardSummary` whose totals,
    category views, timeline and listing describe the filtered subset, while
    ``months`` and ``available_categories`` list the choices present in the
    full input.
    """

    criteria = criteria or FilterCriteria()
    everything = list(transactions)
    view = filters.filter_transactions(everything, criteria)

    return DashboardSummary(
        criteria=criteria,
        totals=aggregate.compute_totals(view),
        categories=tuple(aggregate.expense_category_breakdown(view)),
        top_categories=tuple(aggregate.top_expense_categories(view, top)),
        timeline=tuple(aggregate.monthly_series(view)),
        transactions=tuple(aggregate.sort_newest_first(view)),
        months=tuple(filters.available_months(everything)),
        available_categories=tuple(filters.available_categories(everything)),
    )


def report_trends(transactions: Iterable[Transaction], *, width: int = 100) -> str:
    """Render expense totals by category by month, with overall totals, as text.

    Printing the string is the caller's responsibility.
    """

    from .report import render_trends

    return render_trends(aggregate.expense_trends(transactions), width=width)


__all__ = ["ingest_statement", "report_trends", "summarize"]
