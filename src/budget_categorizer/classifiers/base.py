from abc import ABC, abstractmethod
from dataclasses import dataclass

from budget_categorizer.domain.normalize import normalize_name
from budget_categorizer.models import CategorizationResult, TransactionInput, TransactionType


@dataclass(frozen=True)
class CategorizationContext:
    transaction: TransactionInput
    user_id: str
    normalized_name: str
    type: TransactionType

    @classmethod
    def build(cls, transaction: TransactionInput, user_id: str) -> "CategorizationContext":
        return cls(
            transaction=transaction,
            user_id=user_id,
            normalized_name=normalize_name(transaction.display_name),
            type=transaction.transaction_type,
        )

    def result(self, category: str, confidence: float, reason: str) -> CategorizationResult:
        return CategorizationResult(
            category=category,
            type=self.type,
            confidence=confidence,
            reason=reason,
        )


class Classifier(ABC):
    @abstractmethod
    async def classify(self, context: CategorizationContext) -> CategorizationResult | None:
        """Decide the category, or return None to let the next stage try."""
        pass
