from budget_categorizer.domain.keyword_table import KeywordTable, load_keyword_table, score_categories
from budget_categorizer.logger import get_logger
from budget_categorizer.models import KEYWORD_SCORE_THRESHOLD, CategorizationResult

from .base import CategorizationContext, Classifier

logger = get_logger(__name__)


class KeywordScoringClassifier(Classifier):
    def __init__(self, table: KeywordTable | None = None, threshold: float = KEYWORD_SCORE_THRESHOLD):
        self.table = table if table is not None else load_keyword_table()
        self.threshold = threshold

    async def classify(self, context: CategorizationContext) -> CategorizationResult | None:
        if context.type != "expense" or not self.table:
            return None

        scores = score_categories(context.normalized_name, self.table)
        best_category, best_score = scores[0]
        logger.debug(f"Best keyword score for '{context.normalized_name}': {best_category}={best_score:.2f}")

        if best_score < self.threshold:
            return None
        confidence = max(0.0, min(1.0, best_score))
        return context.result(best_category, confidence, "keyword_scoring")
