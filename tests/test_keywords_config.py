import json

import pytest
from pydantic import ValidationError

from personal_finance import (
    DEFAULT_KEYWORD_TABLE,
    CategoryRule,
    ConfigurationError,
    KeywordTable,
    KeywordTableError,
    TransactionType,
    categorize,
    load_keyword_table,
)
from personal_finance.config import Settings, load_settings
from personal_finance.keywords import category_color, dump_keyword_table


def _write_table(tmp_path, payload, name="keywords.json"):
    path = tmp_path / name
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


# ---- CategoryRule / KeywordTable ----------------------------------------------


def test_rule_keywords_are_trimmed_and_lowercased():
    rule = CategoryRule(category=" pets ", keywords=(" PetShop ", "VET"))
    assert rule.category == "pets"
    assert rule.keywords == ("petshop", "vet")
    assert rule.matches("consulta vet centro")


@pytest.mark.parametrize(
    "payload",
    [
        {"category": "x", "keywords": []},
        {"category": "x", "keywords": ["ok", "  "]},
        {"category": "", "keywords": ["a"]},
        {"category": "x", "keywords": ["a"], "extra": 1},
    ],
)
def test_rule_validation(payload):
    with pytest.raises(ValidationError):
        CategoryRule.model_validate(payload)


def test_tables_are_immutable():
    with pytest.raises(ValidationError):
        DEFAULT_KEYWORD_TABLE.fallback_category = "misc"


def test_category_color_fallback():
    assert category_color("food") == "#ef4444"
    assert category_color("unknown") == "#64748b"


# ---- JSON loading -------------------------------------------------------------


def test_dump_and_load_default_table(tmp_path):
    path = tmp_path / "default.json"
    path.write_text(dump_keyword_table(DEFAULT_KEYWORD_TABLE), encoding="utf-8")

    assert load_keyword_table(path) == DEFAULT_KEYWORD_TABLE


def test_loaded_table_drives_categorization(tmp_path):
    path = _write_table(
        tmp_path,
        {
            "income": [{"category": "refund", "keywords": ["Estorno"]}],
            "expense": [{"category": "pets", "keywords": ["petz"]}],
            "fallback_category": "misc",
        },
    )
    table = load_keyword_table(path)

    assert categorize("PETZ loja 12", -50, table=table).category == "pets"
    assert categorize("estorno", 5, table=table).category == "refund"
    assert categorize("Uber", -5, table=table).category == "misc"
    assert table.categories_for(TransactionType.INCOME) == ("refund", "misc")


def test_load_missing_file(tmp_path):
    with pytest.raises(KeywordTableError, match="not found"):
        load_keyword_table(tmp_path / "nope.json")


def test_load_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(KeywordTableError, match="not valid JSON"):
        load_keyword_table(path)


def test_load_schema_mismatch(tmp_path):
    path = _write_table(tmp_path, {"income": [], "expenses": []})
    with pytest.raises(KeywordTableError, match="invalid keyword table"):
        load_keyword_table(path)


def test_keyword_table_error_is_value_error():
    assert issubclass(KeywordTableError, ValueError)


# ---- Settings -----------------------------------------------------------------


def test_settings_defaults():
    settings = load_settings(env={})

    assert settings == Settings()
    assert settings.top_categories == 5
    assert settings.accepted_extensions == (".csv", ".txt")
    assert settings.keyword_table() is DEFAULT_KEYWORD_TABLE


def test_settings_from_environment(tmp_path):
    path = _write_table(
        tmp_path,
        {"income": [], "expense": [{"category": "pets", "keywords": ["vet"]}]},
    )
    settings = load_settings(env={"PF_KEYWORDS_FILE": str(path), "PF_TOP_CATEGORIES": " 3 "})

    assert settings.top_categories == 3
    assert settings.keywords_file == path
    assert isinstance(settings.keyword_table(), KeywordTable)


def test_settings_read_os_environ_by_default(monkeypatch):
    monkeypatch.setenv("PF_TOP_CATEGORIES", "7")
    assert load_settings().top_categories == 7


def test_overrides_win_and_none_is_ignored():
    env = {"PF_TOP_CATEGORIES": "3"}

    assert load_settings(env=env, top_categories=9).top_categories == 9
    assert load_settings(env=env, top_categories=None).top_categories == 3


def test_extensions_are_normalized():
    assert Settings(accepted_extensions=("CSV", ".TXT")).accepted_extensions == (".csv", ".txt")


def test_accepted_extensions_from_environment():
    settings = load_settings(env={"PF_ACCEPTED_EXTENSIONS": " CSV, .Txt ,ofx,"})
    assert settings.accepted_extensions == (".csv", ".txt", ".ofx")


def test_accepted_extensions_cannot_be_empty():
    with pytest.raises(ConfigurationError):
        load_settings(env={"PF_ACCEPTED_EXTENSIONS": " , "})


@pytest.mark.parametrize("value", ["0", "-1", "many"])
def test_invalid_top_categories(value):
    with pytest.raises(ConfigurationError):
        load_settings(env={"PF_TOP_CATEGORIES": value})


def test_blank_variables_are_ignored():
    settings = load_settings(env={"PF_KEYWORDS_FILE": "  ", "PF_TOP_CATEGORIES": ""})
    assert settings == Settings()


def test_missing_keywords_file_surfaces_on_use(tmp_path):
    settings = load_settings(env={"PF_KEYWORDS_FILE": str(tmp_path / "missing.json")})
    with pytest.raises(KeywordTableError):
        settings.keyword_table()
