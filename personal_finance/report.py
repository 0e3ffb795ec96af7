"""Text rendering of dashboard views with ``rich``.

``build_*`` functions return rich renderables (the CLI prints them to a live
console with colors); ``render_*`` functions return plain strings suitable for
logs, tests or files.
"""

from __future__ import annotations

import io
from collections.abc import Iterable, Sequence

from rich import box
from rich.console import Console, Group, RenderableType
from rich.table import Table
from rich.text import Text

from .keywords import category_color
from .models import (
    CategorySlice,
    DashboardSummary,
    MonthlySummary,
    SkippedLine,
    Totals,
    Transaction,
    TransactionType,
    TrendTable,
)

INCOME_STYLE = "#10b981"
EXPENSE_STYLE = "#ef4444"


def format_brl(value: float) -> str:
    """``1234.5`` → ``"R$ 1.234,50"``; negatives keep the sign after the symbol."""

    text = f"{round(value, 2) + 0.0:,.2f}"
    return "R$ " + text.replace(",", "_").replace(".", ",").replace("_", ".")


def _category_text(name: str) -> Text:
    return Text(name, style=category_color(name))


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def build_totals(totals: Totals) -> Table:
    table = Table(title="Summary", box=box.SIMPLE_HEAVY)
    table.add_column("Income", justify="right", style=INCOME_STYLE)
    table.add_column("Expenses", justify="right", style=EXPENSE_STYLE)
    table.add_column("Balance", justify="right")
    balance_note = "positive balance" if totals.balance >= 0 else "negative balance"
    table.add_row(
        format_brl(totals.income), format_brl(totals.expense), format_brl(totals.balance)
    )
    table.add_row(
        f"{totals.income_count} transactions",
        f"{totals.expense_count} transactions",
        balance_note,
    )
    return table


def build_categories(
    slices: Sequence[CategorySlice], *, title: str = "Expenses by category"
) -> Table:
    table = Table(title=title, box=box.SIMPLE)
    table.add_column("Category")
    table.add_column("Amount", justify="right")
    table.add_column("Share", justify="right")
    whole = sum(s.value for s in slices)
    for s in slices:
        share = f"{s.value / whole:.0%}" if whole else "-"
        table.add_row(Text(s.name, style=s.color), format_brl(s.value), share)
    return table


def build_monthly(timeline: Sequence[MonthlySummary]) -> Table:
    """Per-month history, newest month first."""

    table = Table(title="Monthly history", box=box.SIMPLE)
    table.add_column("Month")
    table.add_column("Income", justify="right", style=INCOME_STYLE)
    table.add_column("Expenses", justify="right", style=EXPENSE_STYLE)
    table.add_column("Balance", justify="right")
    for point in reversed(timeline):
        table.add_row(
            point.month,
            format_brl(point.income),
            format_brl(point.expense),
            format_brl(point.balance),
        )
    return table


def build_transactions(transactions: Sequence[Transaction]) -> Table:
    table = Table(title=f"{len(transactions)} transactions found", box=box.SIMPLE)
    table.add_column("Date")
    table.add_column("Description")
    table.add_column("Category")
    table.add_column("Amount", justify="right")
    table.add_column("Source")
    for tx in transactions:
        income = tx.type is TransactionType.INCOME
        amount = Text(
            f"{'+' if income else '-'} {format_brl(tx.amount)}",
            style=INCOME_STYLE if income else EXPENSE_STYLE,
        )
        table.add_row(tx.date, tx.description, _category_text(tx.category), amount, tx.source)
    return table


def build_trends(trends: TrendTable) -> Table:
    table = Table(title="Expense trends by category", box=box.SIMPLE)
    table.add_column("Category")
    for month in trends.months:
        table.add_column(month, justify="right")
    table.add_column("Total", justify="right")
    for row in trends.rows:
        table.add_row(
            _category_text(row.category),
            *(format_brl(v) for v in row.by_month),
            format_brl(row.total),
        )
    table.add_section()
    table.add_row(
        "Total",
        *(format_brl(v) for v in trends.month_totals()),
        format_brl(trends.total),
        style="bold",
    )
    return table


def build_skipped(skipped: Sequence[SkippedLine], *, source: str | None = None) -> Table:
    title = f"Skipped lines in {source}" if source else "Skipped lines"
    table = Table(title=title, box=box.SIMPLE)
    table.add_column("Line", justify="right")
    table.add_column("Reason")
    table.add_column("Text")
    for item in skipped:
        table.add_row(str(item.line_number), item.reason, item.text)
    return table


def build_dashboard(summary: DashboardSummary) -> Group:
    parts: list[RenderableType] = [build_totals(summary.totals)]
    if summary.categories:
        parts.append(build_categories(summary.categories))
        parts.append(build_categories(summary.top_categories, title="Top categories"))
    if summary.timeline:
        parts.append(build_monthly(summary.timeline))
    parts.append(build_transactions(summary.transactions))
    return Group(*parts)


# ---------------------------------------------------------------------------
# Plain-text renderers
# ---------------------------------------------------------------------------


def to_text(renderables: Iterable[RenderableType], *, width: int = 100) -> str:
    buffer = io.StringIO()
    console = Console(file=buffer, width=width, color_system=None, force_terminal=False)
    for renderable in renderables:
        console.print(renderable)
    return buffer.getvalue()


def render_dashboard(summary: DashboardSummary, *, width: int = 100) -> str:
    return to_text([build_dashboard(summary)], width=width)


def render_trends(trends: TrendTable, *, width: int = 100) -> str:
    return to_text([build_trends(trends)], width=width)


__all__ = [
    "build_dashboard",
    "build_skipped",
    "build_transactions",
    "build_trends",
    "format_brl",
    "render_dashboard",
    "render_trends",
    "to_text",
]
