from budget_categorizer.domain.normalize import contains_any
from budget_categorizer.models import (
    CONFIDENCE_KEYWORD_RULE,
    CONFIDENCE_TRANSACTION_CODE,
    CategorizationResult,
)

from .base import CategorizationContext, Classifier

REFUND_CODES = ("refund", "reversal", "chargeback", "return")
REFUND_KEYWORDS = ("refund", "return", "reversal", "chargeback")
TRANSFER_KEYWORDS = ("transfer", "zelle", "venmo", "cash app", "paypal")


class HardRuleClassifier(Classifier):
    """Refund and transfer detection for expenses, first match wins."""

    async def classify(self, context: CategorizationContext) -> CategorizationResult | None:
        if context.type != "expense":
            return None

        code = (context.transaction.transaction_code or "").lower()
        if code and contains_any(code, REFUND_CODES):
            return context.result("Adjustments", CONFIDENCE_TRANSACTION_CODE, "transaction_code")

        name = context.normalized_name
        if contains_any(name, REFUND_KEYWORDS):
            return context.result("Adjustments", CONFIDENCE_KEYWORD_RULE, "keyword_refund")
        if contains_any(name, TRANSFER_KEYWORDS):
            return context.result("Transfers Out", CONFIDENCE_KEYWORD_RULE, "keyword_transfer")

        return None
