from budget_categorizer.logger import get_logger
from budget_categorizer.models import (
    CONFIDENCE_OVERRIDE_MERCHANT_ID,
    CONFIDENCE_OVERRIDE_NAME,
    CategorizationResult,
)
from budget_categorizer.overrides import OverrideLookupError, OverrideStore

from .base import CategorizationContext, Classifier

logger = get_logger(__name__)


class OverrideClassifier(Classifier):
    """User corrections: merchant id first, then normalized name."""

    def __init__(self, store: OverrideStore):
        self.store = store

    async def classify(self, context: CategorizationContext) -> CategorizationResult | None:
        merchant_id = context.transaction.merchant_id
        try:
            if merchant_id:
                override = await self.store.get_by_merchant_id(context.user_id, merchant_id)
                if override:
                    return context.result(
                        override.category,
                        CONFIDENCE_OVERRIDE_MERCHANT_ID,
                        "user_override_merchant_id",
                    )

            if context.normalized_name:
                override = await self.store.get_by_name(context.user_id, context.normalized_name)
                if override:
                    return context.result(
                        override.category,
                        CONFIDENCE_OVERRIDE_NAME,
                        "user_override_name",
                    )
        except OverrideLookupError:
            raise
        except Exception as e:
            logger.error(f"Override lookup failed for user '{context.user_id}': {e}")
            raise OverrideLookupError(f"Override lookup failed: {e}") from e

        return None
