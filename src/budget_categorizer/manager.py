from budget_categorizer.classifiers.base import CategorizationContext, Classifier
from budget_categorizer.classifiers.income import IncomeClassifier
from budget_categorizer.classifiers.keywords import KeywordScoringClassifier
from budget_categorizer.classifiers.override import OverrideClassifier
from budget_categorizer.classifiers.rules import HardRuleClassifier
from budget_categorizer.classifiers.upstream import UpstreamCategoryClassifier
from budget_categorizer.domain.keyword_table import KeywordTable
from budget_categorizer.domain.normalize import normalize_name
from budget_categorizer.logger import get_logger
from budget_categorizer.models import (
    CONFIDENCE_FALLBACK,
    CONFIDENCE_INCOME_DEFAULT,
    CategorizationResult,
    TransactionInput,
)
from budget_categorizer.overrides import OverrideLookupError, OverrideStore

logger = get_logger(__name__)


class CategorizerService:
    def __init__(self,
                 override_store: OverrideStore,
                 keyword_table: KeywordTable | None = None):

        self.override_store = override_store

        self.classifiers: list[Classifier] = [
            # 1. User corrections (highest priority)
            OverrideClassifier(override_store),
            # 2. Provider category hint
            UpstreamCategoryClassifier(),
            # 3. Income heuristics, terminal for money received
            IncomeClassifier(),
            # 4. Refund / transfer rules (expenses)
            HardRuleClassifier(),
            # 5. Weighted keyword scoring (expenses)
            KeywordScoringClassifier(keyword_table),
        ]

    async def categorize(self, transaction: TransactionInput, user_id: str) -> CategorizationResult:
        """
        Run the stages in order and return the first decision.

        Never returns None: when no stage decides, the fallback category for
        the transaction type is returned. Override store failures propagate
        as OverrideLookupError.
        """
        context = CategorizationContext.build(transaction, user_id)

        for classifier in self.classifiers:
            classifier_name = classifier.__class__.__name__
            result = await classifier.classify(context)

            if result:
                logger.debug(
                    f"{classifier_name} decided '{result.category}' for '{context.normalized_name[:50]}' "
                    f"(confidence: {result.confidence:.2f}, reason: {result.reason})"
                )
                return result

        logger.debug(f"No stage matched '{context.normalized_name[:50]}', using fallback.")
        if context.type == "income":
            return context.result("Other Income", CONFIDENCE_INCOME_DEFAULT, "income_default")
        return context.result("Other Expenses", CONFIDENCE_FALLBACK, "fallback")

    async def learn(self, transaction: TransactionInput, user_id: str, category: str) -> None:
        """
        Remember a manual correction by merchant id and by normalized name.

        Store failures are raised as OverrideLookupError.
        """
        if not category or not category.strip():
            raise ValueError("category must not be empty")
        category = category.strip()

        normalized = normalize_name(transaction.display_name)
        try:
            if transaction.merchant_id:
                await self.override_store.set_by_merchant_id(user_id, transaction.merchant_id, category)
            if normalized:
                await self.override_store.set_by_name(user_id, normalized, category)
        except Exception as e:
            logger.error(f"Override store write failed for user '{user_id}': {e}")
            raise OverrideLookupError(f"Override write failed: {e}") from e

        logger.info(
            f"Learned '{category}' for user '{user_id}' "
            f"(merchant_id={transaction.merchant_id or 'N/A'}, name='{normalized}')"
        )
