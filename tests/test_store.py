import asyncio
import logging

import pytest

from personal_finance import (
    IngestionError,
    StatementSession,
    TransactionStore,
    UnsupportedFileError,
    append_batch,
)
from personal_finance.store import ensure_supported_file
from tests.helpers.statements import SAMPLE_STATEMENT, expense, income


# ---- TransactionStore ----------------------------------------------------------


def test_extend_returns_new_store_and_keeps_old_one():
    a, b = income("01/01/2024", 1, id="a"), expense("02/01/2024", 2, id="b")
    empty = TransactionStore()

    one = empty.extend([a])
    two = one.extend([b])

    assert len(empty) == 0
    assert one.transactions == (a,)
    assert two.transactions == (a, b)
    assert list(two) == [a, b]


def test_extend_with_empty_batch_is_identity():
    store = TransactionStore((income("01/01/2024", 1, id="a"),))
    assert store.extend([]) is store


def test_extend_rejects_duplicate_ids():
    a = income("01/01/2024", 1, id="same")
    store = TransactionStore((a,))

    with pytest.raises(ValueError, match="duplicate"):
        store.extend([expense("02/01/2024", 2, id="same")])
    with pytest.raises(ValueError):
        TransactionStore().extend([a, a])
    assert store.transactions == (a,)


def test_append_batch_functional_form():
    a, b = income("01/01/2024", 1, id="a"), expense("02/01/2024", 2, id="b")
    current = [a]

    assert append_batch(current, [b]) == (a, b)
    assert current == [a]


# ---- ensure_supported_file -----------------------------------------------------


@pytest.mark.parametrize("name", ["extrato.csv", "EXTRATO.CSV", "notes.txt", "dir/a.Txt"])
def test_supported_extensions(name):
    ensure_supported_file(name)


@pytest.mark.parametrize("name", ["extrato.pdf", "extrato", "archive.csv.zip", ".csv.bak"])
def test_unsupported_extensions(name):
    with pytest.raises(UnsupportedFileError):
        ensure_supported_file(name)


def test_unsupported_file_error_is_an_ingestion_error():
    assert issubclass(UnsupportedFileError, IngestionError)
    assert issubclass(UnsupportedFileError, ValueError)


# ---- StatementSession ----------------------------------------------------------


def test_ingest_text_appends_whole_file():
    session = StatementSession()
    report = session.ingest_text(SAMPLE_STATEMENT, "jan.csv")

    assert report.ok
    assert report.source == "jan.csv"
    assert len(report.added) == 7
    assert [s.line_number for s in report.skipped] == [8]
    assert session.transactions == report.added


def test_reuploading_same_file_appends_again_with_fresh_ids():
    session = StatementSession()
    session.ingest_text(SAMPLE_STATEMENT, "jan.csv")
    session.ingest_text(SAMPLE_STATEMENT, "jan.csv")

    ids = [t.id for t in session.transactions]
    assert len(ids) == 14
    assert len(set(ids)) == 14


def test_ingest_text_rejects_unsupported_name_without_touching_store():
    session = StatementSession()
    with pytest.raises(UnsupportedFileError):
        session.ingest_text(SAMPLE_STATEMENT, "statement.pdf")
    assert session.transactions == ()


def test_ingest_bytes_keeps_windows_punctuation_inside_the_line():
    session = StatementSession()
    data = "01/01/2024;Compra\u2026 loja;-10,00\n".encode("cp1252")
    report = session.ingest_bytes(data, "x.csv")

    (tx,) = report.added
    assert tx.description == "Compra\u2026 loja"
    assert tx.amount == 10.0
    assert tx.category == "shopping"
    assert report.skipped == ()


def test_session_accepts_configured_extensions():
    session = StatementSession(accepted_extensions=("DAT",))
    session.ingest_text("01/01/2024;Uber;-5", "export.dat")

    assert len(session.transactions) == 1
    with pytest.raises(UnsupportedFileError):
        session.ingest_text("01/01/2024;Uber;-5", "export.csv")


def test_ingest_bytes_decodes_latin1():
    session = StatementSession()
    report = session.ingest_bytes("01/01/2024;Farmácia;-10".encode("latin-1"), "a.txt")

    (tx,) = report.added
    assert tx.description == "Farmácia"
    assert tx.category == "health"


def test_ingest_path_reads_file(tmp_path):
    path = tmp_path / "feb.csv"
    path.write_text(SAMPLE_STATEMENT, encoding="utf-8")

    session = StatementSession()
    report = session.ingest_path(path)

    assert report.source == "feb.csv"
    assert all(t.source == "feb.csv" for t in session.transactions)


def test_ingest_path_missing_file_raises(tmp_path):
    with pytest.raises(IngestionError, match="cannot read"):
        StatementSession().ingest_path(tmp_path / "missing.csv")


def test_ingest_paths_reports_failures_per_file(tmp_path):
    good = tmp_path / "good.csv"
    good.write_text("01/01/2024;Salário;100\n", encoding="utf-8")
    bad_ext = tmp_path / "bad.pdf"
    bad_ext.write_text("whatever", encoding="utf-8")

    session = StatementSession()
    reports = session.ingest_paths([good, tmp_path / "missing.csv", bad_ext])

    assert [r.ok for r in reports] == [True, False, False]
    assert [r.source for r in reports] == ["good.csv", "missing.csv", "bad.pdf"]
    assert len(session.transactions) == 1


def test_ingest_paths_async_keeps_each_file_contiguous(tmp_path):
    first = tmp_path / "a.csv"
    second = tmp_path / "b.txt"
    first.write_text("\n".join(f"0{i}/01/2024;Uber;-{i}" for i in range(1, 6)), encoding="utf-8")
    second.write_text(
        "\n".join(f"0{i}/02/2024;Netflix;-{i}" for i in range(1, 4)), encoding="utf-8"
    )

    session = StatementSession()
    reports = asyncio.run(session.ingest_paths_async([first, tmp_path / "nope.csv", second]))

    assert [r.source for r in reports] == ["a.csv", "nope.csv", "b.txt"]
    assert [r.ok for r in reports] == [True, False, True]

    sources = [t.source for t in session.transactions]
    assert sorted(sources) == ["a.csv"] * 5 + ["b.txt"] * 3
    # One file's records are never interleaved with another's.
    assert sources in (["a.csv"] * 5 + ["b.txt"] * 3, ["b.txt"] * 3 + ["a.csv"] * 5)
    for name in ("a.csv", "b.txt"):
        amounts = [t.amount for t in session.transactions if t.source == name]
        assert amounts == sorted(amounts)


def test_ingest_logs_per_file(tmp_path, caplog):
    path = tmp_path / "a.csv"
    path.write_text("01/01/2024;Salário;100\nbroken\n", encoding="utf-8")

    session = StatementSession()
    with caplog.at_level(logging.INFO, logger="personal_finance"):
        session.ingest_paths([path, tmp_path / "missing.csv"])

    messages = [r.getMessage() for r in caplog.records]
    assert any("ingested 1 transactions from a.csv (1 lines skipped)" in m for m in messages)
    assert any(
        r.levelno == logging.ERROR and "missing.csv" in r.getMessage() for r in caplog.records
    )


def test_session_can_start_from_existing_store():
    seed = TransactionStore((income("01/01/2024", 1, id="seed"),))
    session = StatementSession(store=seed)
    session.ingest_text("02/01/2024;Uber;-5", "x.csv")

    assert session.transactions[0].id == "seed"
    assert len(session.store) == 2
