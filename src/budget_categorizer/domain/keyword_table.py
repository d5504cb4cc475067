import json
import os

from pydantic import BaseModel, ConfigDict, TypeAdapter

from budget_categorizer.domain.normalize import contains_any

DEFAULT_RULES_PATH = os.path.join(os.path.dirname(__file__), "..", "data", "keyword_rules.json")


class KeywordRule(BaseModel):
    model_config = ConfigDict(frozen=True)

    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()
    weight: float


KeywordTable = dict[str, tuple[KeywordRule, ...]]

_TABLE_ADAPTER = TypeAdapter(KeywordTable)


def load_keyword_table(path: str | None = None) -> KeywordTable:
    """
    Load the category -> scoring rules table from JSON.

    Keywords are lower-cased so they compare against normalized names.
    Raises ValueError for unreadable JSON and pydantic.ValidationError for a
    file that does not match the rule shape.
    """
    rules_path = path or DEFAULT_RULES_PATH
    with open(rules_path, encoding="utf-8") as handle:
        try:
            raw = json.load(handle)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid keyword rules file {rules_path}: {exc}") from exc

    table = _TABLE_ADAPTER.validate_python(raw)
    return {
        category: tuple(
            rule.model_copy(update={
                "include": tuple(k.lower() for k in rule.include),
                "exclude": tuple(k.lower() for k in rule.exclude),
            })
            for rule in rules
        )
        for category, rules in table.items()
    }


def score_categories(normalized_name: str, table: KeywordTable) -> list[tuple[str, float]]:
    """Score every category independently, best first. Ties keep table order."""
    scores: list[tuple[str, float]] = []
    for category, rules in table.items():
        score = 0.0
        for rule in rules:
            if rule.include and contains_any(normalized_name, rule.include):
                score += rule.weight
            if rule.exclude and contains_any(normalized_name, rule.exclude):
                score += rule.weight
        scores.append((category, score))
    return sorted(scores, key=lambda item: item[1], reverse=True)
