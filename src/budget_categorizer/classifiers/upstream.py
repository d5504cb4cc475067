from budget_categorizer.domain.upstream import map_upstream_category
from budget_categorizer.models import CONFIDENCE_UPSTREAM, CategorizationResult

from .base import CategorizationContext, Classifier


class UpstreamCategoryClassifier(Classifier):
    async def classify(self, context: CategorizationContext) -> CategorizationResult | None:
        raw_category = context.transaction.upstream_category
        mapped = map_upstream_category(raw_category)
        if not mapped:
            return None
        # Reason keeps the provider's raw string for diagnostics
        return context.result(mapped, CONFIDENCE_UPSTREAM, f"plaid:{raw_category}")
