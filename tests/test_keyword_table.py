import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from budget_categorizer.domain.keyword_table import (
    KeywordRule,
    load_keyword_table,
    score_categories,
)
from budget_categorizer.models import BUDGET_CATEGORIES


@pytest.fixture
def table():
    return load_keyword_table()


def _write_rules(tmp_path: Path, rules: object) -> str:
    path = tmp_path / "rules.json"
    path.write_text(json.dumps(rules), encoding="utf-8")
    return str(path)


def test_default_table_uses_budget_categories(table) -> None:
    assert "Food" in table
    assert set(table) <= set(BUDGET_CATEGORIES)
    food_exclusion = table["Food"][-1]
    assert food_exclusion.exclude == ("apple store", "app store")
    assert food_exclusion.weight == pytest.approx(-0.6)


def test_score_prefers_strongest_category(table) -> None:
    best_category, best_score = score_categories("starbucks 123", table)[0]
    assert best_category == "Food"
    assert best_score == pytest.approx(0.8)


def test_exclude_rule_subtracts_from_its_own_category_only(table) -> None:
    scores = dict(score_categories("apple store cafe", table))
    assert scores["Food"] == pytest.approx(0.0)
    assert scores["Shopping"] == pytest.approx(0.7)


def test_rules_accumulate_within_a_category(table) -> None:
    scores = dict(score_categories("starbucks coffee", table))
    assert scores["Food"] == pytest.approx(1.4)


def test_ties_keep_table_order() -> None:
    rule = KeywordRule(include=("abc",), weight=0.7)
    scores = score_categories("abc", {"First": (rule,), "Second": (rule,)})
    assert [category for category, _ in scores] == ["First", "Second"]


def test_load_custom_table_lowercases_keywords(tmp_path: Path) -> None:
    path = _write_rules(tmp_path, {"Food": [{"include": ["PIZZA"], "weight": 0.7}]})
    table = load_keyword_table(path)
    assert table == {"Food": (KeywordRule(include=("pizza",), weight=0.7),)}


def test_load_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "rules.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError):
        load_keyword_table(str(path))


def test_load_rule_without_weight(tmp_path: Path) -> None:
    path = _write_rules(tmp_path, {"Food": [{"include": ["pizza"]}]})
    with pytest.raises(ValidationError):
        load_keyword_table(path)
