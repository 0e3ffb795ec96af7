"""Keyword tables used by the categorizer.

A table holds, per transaction type, an ordered list of ``(category,
keywords)`` rules. Order matters: the categorizer picks the first rule whose
keywords match, so a description mentioning both "uber eats" and "uber" is
``food`` because ``food`` is listed before ``transport``.

Tables are plain data. The built-in :data:`DEFAULT_KEYWORD_TABLE` mirrors the
Portuguese statement vocabulary the tool was written for; a replacement can
be loaded from JSON with :func:`load_keyword_table`::

    {
      "income":  [{"category": "salary", "keywords": ["salario", "salário"]}],
      "expense": [{"category": "food", "keywords": ["ifood", "padaria"]}],
      "fallback_category": "other"
    }
"""

from __future__ import annotations

import json
from os import PathLike
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .errors import KeywordTableError
from .models import TransactionType

DEFAULT_COLOR = "#64748b"

CATEGORY_COLORS: dict[str, str] = {
    "salary": "#10b981",
    "freelance": "#3b82f6",
    "investment": "#8b5cf6",
    "food": "#ef4444",
    "transport": "#f59e0b",
    "housing": "#06b6d4",
    "health": "#ec4899",
    "education": "#6366f1",
    "leisure": "#14b8a6",
    "shopping": "#f97316",
    "other": DEFAULT_COLOR,
}


def category_color(category: str) -> str:
    return CATEGORY_COLORS.get(category, DEFAULT_COLOR)


class CategoryRule(BaseModel):
    """One ordered entry of a keyword table."""

    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    category: str
    keywords: tuple[str, ...]

    @field_validator("category")
    @classmethod
    def _category_non_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("category must be non-empty")
        return v

    @field_validator("keywords")
    @classmethod
    def _normalize_keywords(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        # Matching runs against a lower-cased description.
        items = tuple(k.strip().lower() for k in v)
        if not items or any(not k for k in items):
            raise ValueError("keywords must be a non-empty list of non-empty strings")
        return items

    def matches(self, lowered_description: str) -> bool:
        return any(keyword in lowered_description for keyword in self.keywords)


class KeywordTable(BaseModel):
    """Ordered keyword rules per transaction type plus the fallback category."""

    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    income: tuple[CategoryRule, ...]
    expense: tuple[CategoryRule, ...]
    fallback_category: str = "other"

    def rules_for(self, tx_type: TransactionType) -> tuple[CategoryRule, ...]:
        return self.income if tx_type is TransactionType.INCOME else self.expense

    def categories_for(self, tx_type: TransactionType) -> tuple[str, ...]:
        """Categories valid for ``tx_type``, in table order, fallback included."""

        names: list[str] = []
        for rule in self.rules_for(tx_type):
            if rule.category not in names:
                names.append(rule.category)
        if self.fallback_category not in names:
            names.append(self.fallback_category)
        return tuple(names)


def _rules(pairs: list[tuple[str, list[str]]]) -> tuple[CategoryRule, ...]:
    return tuple(CategoryRule(category=c, keywords=tuple(k)) for c, k in pairs)


DEFAULT_KEYWORD_TABLE = KeywordTable(
    income=_rules(
        [
            ("salary", ["salario", "salário", "vencimento", "pagamento"]),
            ("freelance", ["freelance", "freela", "projeto", "consultoria"]),
            ("investment", ["dividendo", "rendimento", "juros", "investimento"]),
            ("other", ["transferencia", "pix recebido", "deposito"]),
        ]
    ),
    expense=_rules(
        [
            (
                "food",
                [
                    "restaurante",
                    "ifood",
                    "rappi",
                    "uber eats",
                    "mercado",
                    "supermercado",
                    "padaria",
                ],
            ),
            ("transport", ["uber", "99", "gasolina", "combustivel", "estacionamento", "pedagio"]),
            ("housing", ["aluguel", "condominio", "luz", "agua", "gas", "internet"]),
            ("health", ["farmacia", "medico", "hospital", "plano de saude", "consulta"]),
            ("education", ["escola", "faculdade", "curso", "livro", "udemy"]),
            ("leisure", ["cinema", "netflix", "spotify", "amazon prime", "show", "viagem"]),
            ("shopping", ["amazon", "mercado livre", "magazine", "loja", "shopping"]),
            ("other", ["saque", "transferencia", "pix enviado"]),
        ]
    ),
)


def load_keyword_table(path: str | PathLike[str]) -> KeywordTable:
    """Read and validate a JSON keyword table.

    Raises :class:`~personal_finance.errors.KeywordTableError` when the file
    cannot be read, is not JSON, or does not match the table schema.
    """

    p = Path(path)
    try:
        with p.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as exc:
        raise KeywordTableError(f"keyword table not found: {p}") from exc
    except OSError as exc:
        raise KeywordTableError(f"cannot read keyword table {p}: {exc}") from exc
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise KeywordTableError(f"keyword table {p} is not valid JSON: {exc}") from exc

    try:
        return KeywordTable.model_validate(data)
    except ValidationError as exc:
        raise KeywordTableError(f"invalid keyword table {p}: {exc}") from exc


def dump_keyword_table(table: KeywordTable) -> str:
    """Serialize ``table`` in the format accepted by :func:`load_keyword_table`."""

    return json.dumps(table.model_dump(mode="json"), ensure_ascii=False, indent=2)


__all__ = [
    "CATEGORY_COLORS",
    "CategoryRule",
    "DEFAULT_KEYWORD_TABLE",
    "KeywordTable",
    "category_color",
    "dump_keyword_table",
    "load_keyword_table",
]
