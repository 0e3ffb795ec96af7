"""Append-only transaction store and the session that owns it.

:class:`TransactionStore` is an immutable value: :meth:`TransactionStore.extend`
returns a new store holding the current sequence followed by the new batch.
:class:`StatementSession` is the single update path: it accepts statement
files at the ingestion boundary, parses them, and swaps in the extended store
one whole file at a time.

Several files may be read concurrently with :meth:`StatementSession.ingest_paths_async`;
reads run in worker threads while parsing and appending stay on the event
loop, so appends interleave only at file granularity and each file keeps its
line order. A file that cannot be read is reported and leaves the store
untouched.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from os import PathLike
from pathlib import Path, PurePath

from .config import ACCEPTED_EXTENSIONS, normalize_extension
from .errors import IngestionError, UnsupportedFileError
from .keywords import DEFAULT_KEYWORD_TABLE, KeywordTable
from .logging_setup import get_logger
from .models import IngestReport, Transaction
from .parser import decode_bytes, parse_statement_detailed

_logger = get_logger("personal_finance.store")


@dataclass(frozen=True, slots=True)
class TransactionStore:
    """Ordered, append-only sequence of transactions."""

    transactions: tuple[Transaction, ...] = ()

    def extend(self, batch: Iterable[Transaction]) -> TransactionStore:
        """Return a new store with ``batch`` appended after the current items.

        Raises ``ValueError`` when a batch id is already present, leaving the
        store unchanged.

        Each call copies the sequence and rebuilds the id set, so ``k`` uploads
        cost ``O(k * n)`` overall. Stores hold a few statements' worth of lines;
        a mutable index would be needed before this is used for bulk history.
        """

        new_items = tuple(batch)
        if not new_items:
            return self
        seen = {tx.id for tx in self.transactions}
        for tx in new_items:
            if tx.id in seen:
                raise ValueError(f"duplicate transaction id: {tx.id!r}")
            seen.add(tx.id)
        return TransactionStore(self.transactions + new_items)

    def __len__(self) -> int:
        return len(self.transactions)

    def __iter__(self) -> Iterator[Transaction]:
        return iter(self.transactions)


def append_batch(
    current: Sequence[Transaction], batch: Iterable[Transaction]
) -> tuple[Transaction, ...]:
    """Functional form of :meth:`TransactionStore.extend`."""

    return TransactionStore(tuple(current)).extend(batch).transactions


def ensure_supported_file(
    filename: str, accepted_extensions: Sequence[str] = ACCEPTED_EXTENSIONS
) -> None:
    """Reject file names without an accepted extension (case-insensitive)."""

    suffix = PurePath(filename).suffix.lower()
    if suffix not in {normalize_extension(ext) for ext in accepted_extensions}:
        accepted = ", ".join(accepted_extensions)
        raise UnsupportedFileError(f"unsupported statement file {filename!r}; expected {accepted}")


class StatementSession:
    """Session-scoped owner of the transaction store.

    Parameters
    ----------
    table:
        Keyword table used to categorize every ingested line.
    accepted_extensions:
        File-name extensions allowed at the ingestion boundary.
    store:
        Optional starting store (for example, a previous session's).
    """

    def __init__(
        self,
        *,
        table: KeywordTable = DEFAULT_KEYWORD_TABLE,
        accepted_extensions: Sequence[str] = ACCEPTED_EXTENSIONS,
        store: TransactionStore | None = None,
    ) -> None:
        self.table = table
        self.accepted_extensions = tuple(accepted_extensions)
        self._store = store or TransactionStore()

    @property
    def store(self) -> TransactionStore:
        return self._store

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        return self._store.transactions

    # ---- single file --------------------------------------------------------

    def ingest_text(self, content: str, filename: str) -> IngestReport:
        """Parse decoded ``content`` and append the whole file's records at once."""

        ensure_supported_file(filename, self.accepted_extensions)
        result = parse_statement_detailed(content, PurePath(filename).name, table=self.table)
        self._store = self._store.extend(result.transactions)
        _logger.info(
            "ingested %d transactions from %s (%d lines skipped)",
            len(result.transactions),
            filename,
            len(result.skipped),
        )
        return IngestReport(
            source=PurePath(filename).name,
            added=result.transactions,
            skipped=result.skipped,
        )

    def ingest_bytes(self, data: bytes, filename: str) -> IngestReport:
        """Decode an uploaded byte stream and ingest it."""

        return self.ingest_text(decode_bytes(data), filename)

    def ingest_path(self, path: str | PathLike[str]) -> IngestReport:
        """Read a statement file from disk and ingest it.

        Raises :class:`~personal_finance.errors.UnsupportedFileError` for a
        rejected name and :class:`~personal_finance.errors.IngestionError` when
        the file cannot be read.
        """

        p = Path(path)
        ensure_supported_file(p.name, self.accepted_extensions)
        return self.ingest_bytes(_read_bytes(p), p.name)

    # ---- many files ---------------------------------------------------------

    def ingest_paths(self, paths: Iterable[str | PathLike[str]]) -> list[IngestReport]:
        """Ingest files one after another; failures are reported per file."""

        return [self._ingest_or_report(Path(p)) for p in paths]

    async def ingest_paths_async(
        self, paths: Iterable[str | PathLike[str]]
    ) -> list[IngestReport]:
        """Read files concurrently and append each as soon as its read completes.

        Reports are returned in the order of ``paths``; the order in which the
        files land in the store follows read completion.
        """

        async def _one(p: Path) -> IngestReport:
            try:
                ensure_supported_file(p.name, self.accepted_extensions)
                data = await asyncio.to_thread(_read_bytes, p)
            except IngestionError as exc:
                return self._failure(p, exc)
            # No await between parse and append: this file's records land together.
            return self.ingest_bytes(data, p.name)

        return list(await asyncio.gather(*(_one(Path(p)) for p in paths)))

    def _ingest_or_report(self, p: Path) -> IngestReport:
        try:
            return self.ingest_path(p)
        except IngestionError as exc:
            return self._failure(p, exc)

    @staticmethod
    def _failure(p: Path, exc: IngestionError) -> IngestReport:
        _logger.error("could not ingest %s: %s", p, exc)
        return IngestReport(source=p.name, error=str(exc))


def _read_bytes(p: Path) -> bytes:
    try:
        return p.read_bytes()
    except OSError as exc:
        raise IngestionError(f"cannot read {p}: {exc.strerror or exc}") from exc


__all__ = [
    "StatementSession",
    "TransactionStore",
    "append_batch",
    "ensure_supported_file",
]
