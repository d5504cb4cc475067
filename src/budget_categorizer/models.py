from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

TransactionType = Literal["income", "expense"]

BUDGET_CATEGORIES = (
    "Food",
    "Transportation",
    "Shopping",
    "Utilities",
    "Health",
    "Entertainment",
    "Business",
    "Credit Card",
    "Loan Payment",
    "Rent",
    "Car Payment",
    "Insurance",
    "Internet",
    "Phone",
    "Subscriptions",
    "Transfers",
    "Refunds",
    "Salary",
    "Other Income",
    "Other Expenses",
    "Adjustments",
    "Transfers Out",
)

# Fixed confidence per deciding stage
CONFIDENCE_OVERRIDE_MERCHANT_ID = 1.0
CONFIDENCE_OVERRIDE_NAME = 0.95
CONFIDENCE_UPSTREAM = 0.9
CONFIDENCE_TRANSACTION_CODE = 0.9
CONFIDENCE_KEYWORD_RULE = 0.85
CONFIDENCE_INCOME_SALARY = 0.85
CONFIDENCE_INCOME_DEFAULT = 0.7
KEYWORD_SCORE_THRESHOLD = 0.6
CONFIDENCE_FALLBACK = 0.4


class TransactionInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    amount: float = 0.0 # negative = money received
    merchant_id: str | None = None
    merchant_name: str | None = None
    name: str | None = None
    upstream_category: str | None = None
    transaction_code: str | None = None

    @field_validator("amount", mode="before")
    @classmethod
    def _default_amount(cls, value: Any) -> Any:
        return 0.0 if value is None else value

    @property
    def display_name(self) -> str:
        return self.merchant_name or self.name or ""

    @property
    def transaction_type(self) -> TransactionType:
        return "income" if self.amount < 0 else "expense"

    @classmethod
    def from_plaid(cls, payload: dict[str, Any]) -> "TransactionInput":
        """Build an input from a raw bank-data transaction record."""
        try:
            amount = float(payload.get("amount") or 0.0)
        except (TypeError, ValueError):
            amount = 0.0

        upstream = None
        pfc = payload.get("personal_finance_category")
        if isinstance(pfc, dict):
            upstream = pfc.get("detailed") or pfc.get("primary")

        def _text(key: str) -> str | None:
            value = payload.get(key)
            return str(value) if value else None

        return cls(
            amount=amount,
            merchant_id=_text("merchant_id"),
            merchant_name=_text("merchant_name"),
            name=_text("name"),
            upstream_category=str(upstream) if upstream else None,
            transaction_code=_text("transaction_code"),
        )


class UserOverride(BaseModel):
    category: str = Field(min_length=1)
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class CategorizationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: str = Field(min_length=1)
    type: TransactionType
    confidence: float = Field(ge=0.0, le=1.0)
    reason: str # deciding stage, for diagnostics only
