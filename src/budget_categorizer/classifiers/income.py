from budget_categorizer.domain.normalize import contains_any
from budget_categorizer.models import (
    CONFIDENCE_INCOME_DEFAULT,
    CONFIDENCE_INCOME_SALARY,
    CategorizationResult,
)

from .base import CategorizationContext, Classifier

# Includes generic credit terms, so refunds received also land in Salary.
SALARY_KEYWORDS = (
    "payroll",
    "salary",
    "direct deposit",
    "paychex",
    "adp",
    "workday",
    "paycheck",
    "wage",
    "income",
    "deposit",
    "credit",
    "refund",
    "return",
    "bonus",
    "commission",
)


class IncomeClassifier(Classifier):
    """Terminal stage for money received; expenses pass through."""

    async def classify(self, context: CategorizationContext) -> CategorizationResult | None:
        if context.type != "income":
            return None
        if contains_any(context.normalized_name, SALARY_KEYWORDS):
            return context.result("Salary", CONFIDENCE_INCOME_SALARY, "income_keyword_salary")
        return context.result("Other Income", CONFIDENCE_INCOME_DEFAULT, "income_default")
