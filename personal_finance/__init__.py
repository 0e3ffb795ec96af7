"""Public interface for the ``personal_finance`` package.

Statement exports (one ``date;description;amount`` line per transaction) are
parsed into immutable :class:`Transaction` records, categorized by keyword
rules, accumulated in an append-only store and aggregated into totals,
per-category sums and per-month series. This module only re-exports symbols.
"""

from .aggregate import (
    category_breakdown,
    category_totals,
    compute_totals,
    expense_category_breakdown,
    expense_trends,
    month_key,
    monthly_series,
    monthly_totals,
    sort_newest_first,
    top_expense_categories,
)
from .api import ingest_statement, report_trends, summarize
from .categorize import categorize
from .errors import (
    ConfigurationError,
    IngestionError,
    KeywordTableError,
    PersonalFinanceError,
    UnsupportedFileError,
)
from .filters import available_categories, available_months, filter_transactions
from .keywords import DEFAULT_KEYWORD_TABLE, CategoryRule, KeywordTable, load_keyword_table
from .models import (
    ALL,
    CategorySlice,
    Classification,
    DashboardSummary,
    FilterCriteria,
    IngestReport,
    MonthlySummary,
    ParseResult,
    SkippedLine,
    Totals,
    Transaction,
    TransactionType,
    TrendRow,
    TrendTable,
)
from .parser import parse_amount, parse_statement, parse_statement_detailed
from .store import StatementSession, TransactionStore, append_batch

__all__ = [
    # API
    "ingest_statement",
    "summarize",
    "report_trends",
    # Pipeline stages
    "parse_statement",
    "parse_statement_detailed",
    "parse_amount",
    "categorize",
    "filter_transactions",
    "available_months",
    "available_categories",
    "compute_totals",
    "category_totals",
    "category_breakdown",
    "expense_category_breakdown",
    "top_expense_categories",
    "month_key",
    "monthly_totals",
    "monthly_series",
    "sort_newest_first",
    "expense_trends",
    # Store
    "StatementSession",
    "TransactionStore",
    "append_batch",
    # Keyword tables
    "DEFAULT_KEYWORD_TABLE",
    "CategoryRule",
    "KeywordTable",
    "load_keyword_table",
    # Models / types
    "ALL",
    "Transaction",
    "TransactionType",
    "Classification",
    "FilterCriteria",
    "Totals",
    "MonthlySummary",
    "CategorySlice",
    "TrendRow",
    "TrendTable",
    "SkippedLine",
    "ParseResult",
    "IngestReport",
    "DashboardSummary",
    # Errors
    "PersonalFinanceError",
    "IngestionError",
    "UnsupportedFileError",
    "KeywordTableError",
    "ConfigurationError",
]
