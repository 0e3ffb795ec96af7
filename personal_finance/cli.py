"""Typer console interface for ``personal_finance``.

The root callback loads a local ``.env`` (without overriding variables that
are already set) and configures logging; each command then ingests the given
statement files into a fresh session and prints one view with ``rich``.

Negative amounts passed to ``categorize`` need a ``--`` separator so they are
not read as options::

    personal-finance categorize -- "Uber" -25,50
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console

from . import aggregate, filters, report
from .api import summarize
from .categorize import categorize
from .config import Settings, load_settings
from .errors import PersonalFinanceError
from .keywords import dump_keyword_table
from .logging_setup import configure_logging
from .models import ALL, FilterCriteria
from .parser import parse_amount
from .store import StatementSession

app = typer.Typer(
    name="personal-finance",
    help="Summarize income and expenses from bank statement exports (.csv/.txt).",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)

FilesArg = Annotated[
    list[Path],
    typer.Argument(help="Statement files (date;description;amount per line).", dir_okay=False),
]
MonthOpt = Annotated[str, typer.Option("--month", "-m", help='"all" or a MM/YYYY month.')]
CategoryOpt = Annotated[str, typer.Option("--category", "-c", help='"all" or a category tag.')]
KeywordsOpt = Annotated[
    Path | None,
    typer.Option(
        "--keywords-file",
        help="JSON keyword table (overrides PF_KEYWORDS_FILE).",
        dir_okay=False,
    ),
]


# ---- Helpers -----------------------------------------------------------------


def _fail(message: str) -> typer.Exit:
    err_console.print(f"[red]Error:[/red] {message}")
    return typer.Exit(1)


def _settings(keywords_file: Path | None = None, top: int | None = None) -> Settings:
    try:
        return load_settings(keywords_file=keywords_file, top_categories=top)
    except PersonalFinanceError as e:
        raise _fail(str(e)) from e


def _ingest(
    files: list[Path], settings: Settings, *, show_skipped: bool = False
) -> StatementSession:
    """Ingest ``files`` concurrently; exit when none of them could be read."""

    try:
        table = settings.keyword_table()
    except PersonalFinanceError as e:
        raise _fail(str(e)) from e

    session = StatementSession(table=table, accepted_extensions=settings.accepted_extensions)
    reports = asyncio.run(session.ingest_paths_async(files))
    for item in reports:
        if not item.ok:
            err_console.print(f"[yellow]Skipped file[/yellow] {item.source}: {item.error}")
        elif show_skipped and item.skipped:
            err_console.print(report.build_skipped(item.skipped, source=item.source))

    if not any(item.ok for item in reports):
        raise _fail("no statement file could be ingested.")
    return session


# ---- Commands ----------------------------------------------------------------


@app.command("summary")
def summary_cmd(
    files: FilesArg,
    month: MonthOpt = ALL,
    category: CategoryOpt = ALL,
    keywords_file: KeywordsOpt = None,
    top: Annotated[
        int | None, typer.Option(help="Number of top categories (overrides PF_TOP_CATEGORIES).")
    ] = None,
    show_skipped: Annotated[
        bool, typer.Option("--show-skipped", help="List lines that were dropped.")
    ] = False,
) -> None:
    """Totals, expense categories, monthly history and transactions for a view."""

    settings = _settings(keywords_file, top)
    session = _ingest(files, settings, show_skipped=show_skipped)
    criteria = FilterCriteria(month=month, category=category)
    view = summarize(session.transactions, criteria, top=settings.top_categories)

    console.print(report.build_dashboard(view))
    console.print(f"Months: {', '.join(view.months) or '-'}")
    console.print(f"Categories: {', '.join(view.available_categories) or '-'}")


@app.command("transactions")
def transactions_cmd(
    files: FilesArg,
    month: MonthOpt = ALL,
    category: CategoryOpt = ALL,
    keywords_file: KeywordsOpt = None,
) -> None:
    """List the filtered transactions, newest first."""

    session = _ingest(files, _settings(keywords_file))
    view = filters.filter_transactions(
        session.transactions, FilterCriteria(month=month, category=category)
    )
    console.print(report.build_transactions(aggregate.sort_newest_first(view)))


@app.command("trends")
def trends_cmd(files: FilesArg, keywords_file: KeywordsOpt = None) -> None:
    """Expense totals by category by month."""

    session = _ingest(files, _settings(keywords_file))
    console.print(report.build_trends(aggregate.expense_trends(session.transactions)))


@app.command("categorize")
def categorize_cmd(
    description: Annotated[str, typer.Argument(help="Transaction description.")],
    amount: Annotated[str, typer.Argument(help='Signed amount, e.g. "-25,50" or "R$ 1.500,00".')],
    keywords_file: KeywordsOpt = None,
) -> None:
    """Print ``<type>\\t<category>`` for a single description and amount."""

    value = parse_amount(amount)
    if value is None:
        raise _fail(f"not a valid amount: {amount!r}")
    try:
        table = _settings(keywords_file).keyword_table()
    except PersonalFinanceError as e:
        raise _fail(str(e)) from e
    result = categorize(description, value, table=table)
    typer.echo(f"{result.type.value}\t{result.category}")


@app.command("keywords")
def keywords_cmd(keywords_file: KeywordsOpt = None) -> None:
    """Print the active keyword table as JSON (a starting point for PF_KEYWORDS_FILE)."""

    try:
        table = _settings(keywords_file).keyword_table()
    except PersonalFinanceError as e:
        raise _fail(str(e)) from e
    typer.echo(dump_keyword_table(table))


@app.callback()
def _root(
    log_level: Annotated[
        str | None,
        typer.Option(help="Log level (overrides PERSONAL_FINANCE_LOG_LEVEL)."),
    ] = None,
) -> None:
    """Load ``.env`` from the working directory and set up logging."""

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    try:
        configure_logging(log_level)
    except ValueError as e:
        raise _fail(str(e)) from e


if __name__ == "__main__":  # pragma: no cover
    app()
