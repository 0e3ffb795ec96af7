"""Statement text → :class:`~personal_finance.models.Transaction` records.

Expected layout, one transaction per line::

    DD/MM/YYYY;description;amount[;anything else]

Lines are split on ``;`` when the line contains one, otherwise on ``,``.
Amounts may carry an ``R$`` prefix, ``.`` thousands separators and a ``,``
decimal separator (``R$ 1.234,56``). Note that a comma-delimited line cannot
also use a comma decimal separator: ``15/03/2024,Uber,-25,50`` reads the
amount as ``-25``.

Ingestion is best-effort. Blank lines are ignored; lines with fewer than three
fields, an unparseable amount or an empty description are dropped without
raising. :func:`parse_statement_detailed` reports those drops as
:class:`~personal_finance.models.SkippedLine` entries.
"""

from __future__ import annotations

import itertools
import math
import re
import time

from .categorize import categorize
from .keywords import DEFAULT_KEYWORD_TABLE, KeywordTable
from .models import ParseResult, SkippedLine, Transaction

CURRENCY_PREFIX = "R$"

REASON_TOO_FEW_FIELDS = "too_few_fields"
REASON_INVALID_AMOUNT = "invalid_amount"
REASON_EMPTY_DESCRIPTION = "empty_description"

# Longest numeric prefix, mirroring a lenient float parse ("12.5 BRL" -> 12.5).
_FLOAT_PREFIX_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
# A single dot grouping exactly three digits after a 1-3 digit integer part: "1.500".
_GROUPED_THOUSANDS_RE = re.compile(r"[+-]?[1-9]\d{0,2}\.\d{3}")

# Distinguishes batches ingested within the same millisecond.
_batch_counter = itertools.count(1)


# ---------------------------------------------------------------------------
# Amount normalization
# ---------------------------------------------------------------------------


def normalize_amount(raw: str) -> str:
    """Rewrite a locale-formatted amount into ``float``-style notation.

    - ``R$`` and all whitespace are removed.
    - With a ``,`` present, every ``.`` is a thousands separator and ``,`` is
      the decimal separator: ``"1.234,56"`` → ``"1234.56"``.
    - Without a comma, several dots (``"1.234.567"``) or a single dot grouping
      three digits (``"1.500"``) are thousands separators; any other single
      dot is a decimal point (``"5000.00"``).
    """

    s = "".join(raw.replace(CURRENCY_PREFIX, "").split())
    if "," in s:
        return s.replace(".", "").replace(",", ".")
    if s.count(".") > 1 or _GROUPED_THOUSANDS_RE.fullmatch(s):
        return s.replace(".", "")
    return s


def parse_amount(raw: str) -> float | None:
    """Return the signed amount in ``raw``, or ``None`` when it is not a number."""

    m = _FLOAT_PREFIX_RE.match(normalize_amount(raw))
    if m is None:
        return None
    value = float(m.group(0))
    if not math.isfinite(value):
        return None
    return value


# ---------------------------------------------------------------------------
# Byte decoding
# ---------------------------------------------------------------------------


def decode_bytes(data: bytes) -> str:
    """Decode statement bytes as UTF-8 (BOM tolerated), then cp1252, then Latin-1."""

    for encoding in ("utf-8-sig", "cp1252"):
        try:
            return data.decode(encoding)
        except UnicodeDecodeError:
            continue
    # Latin-1 maps every byte, including the five cp1252 leaves undefined.
    return data.decode("latin-1")


# ---------------------------------------------------------------------------
# Line parsing
# ---------------------------------------------------------------------------


def split_fields(line: str) -> list[str]:
    return line.split(";") if ";" in line else line.split(",")


def make_transaction_id(source: str, index: int, timestamp_ms: int, batch: int) -> str:
    return f"{source}-{index}-{timestamp_ms}-{batch}"


def parse_statement_detailed(
    content: str,
    source: str,
    *,
    table: KeywordTable = DEFAULT_KEYWORD_TABLE,
    timestamp_ms: int | None = None,
) -> ParseResult:
    """Parse ``content`` and report both the records and the dropped lines.

    Parameters
    ----------
    content:
        Decoded statement text.
    source:
        File name recorded on each transaction and used in its ``id``.
    table:
        Keyword table handed to the categorizer.
    timestamp_ms:
        Ingestion time in epoch milliseconds; defaults to now. Ids also embed a
        process-wide batch number, so parsing the same content twice never
        yields colliding ids.

    Returns
    -------
    ParseResult
        ``transactions`` in line order and ``skipped`` diagnostics.
    """

    stamp = int(time.time() * 1000) if timestamp_ms is None else timestamp_ms
    batch = next(_batch_counter)

    transactions: list[Transaction] = []
    skipped: list[SkippedLine] = []
    index = -1
    # Only "\n" ends a line; other Unicode line breaks stay inside a field.
    for line_number, raw_line in enumerate(content.split("\n"), start=1):
        line = raw_line.removesuffix("\r")
        if not line.strip():
            continue
        index += 1

        parts = split_fields(line)
        if len(parts) < 3:
            skipped.append(SkippedLine(line_number, line, REASON_TOO_FEW_FIELDS))
            continue

        date = parts[0].strip()
        description = parts[1].strip()
        amount = parse_amount(parts[2])
        if amount is None:
            skipped.append(SkippedLine(line_number, line, REASON_INVALID_AMOUNT))
            continue
        if not description:
            skipped.append(SkippedLine(line_number, line, REASON_EMPTY_DESCRIPTION))
            continue

        # Classification needs the sign; the record only keeps the magnitude.
        classification = categorize(description, amount, table=table)
        transactions.append(
            Transaction(
                id=make_transaction_id(source, index, stamp, batch),
                date=date,
                description=description,
                amount=abs(amount),
                type=classification.type,
                category=classification.category,
                source=source,
            )
        )

    return ParseResult(transactions=tuple(transactions), skipped=tuple(skipped))


def parse_statement(
    content: str,
    source: str,
    *,
    table: KeywordTable = DEFAULT_KEYWORD_TABLE,
    timestamp_ms: int | None = None,
) -> list[Transaction]:
    """Parse ``content`` into transactions in line order; malformed lines are dropped."""

    result = parse_statement_detailed(content, source, table=table, timestamp_ms=timestamp_ms)
    return list(result.transactions)


__all__ = [
    "decode_bytes",
    "normalize_amount",
    "parse_amount",
    "parse_statement",
    "parse_statement_detailed",
]
