import asyncio
from collections.abc import Sequence
from time import perf_counter
from typing import Any

from budget_categorizer.logger import get_logger
from budget_categorizer.manager import CategorizerService
from budget_categorizer.models import CategorizationResult, TransactionInput

logger = get_logger(__name__)


class CategorizationPipeline:
    """Categorizes imported batches concurrently on top of a CategorizerService."""

    def __init__(
        self,
        service: CategorizerService,
        *,
        concurrency: int = 8,
        timeout: float | None = None,
    ) -> None:
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self.service = service
        self.concurrency = concurrency
        self.timeout = timeout

    async def predict(self, transaction: TransactionInput, user_id: str) -> CategorizationResult:
        if self.timeout is None:
            return await self.service.categorize(transaction, user_id)
        return await asyncio.wait_for(
            self.service.categorize(transaction, user_id),
            timeout=self.timeout,
        )

    async def categorize_batch(
        self,
        transactions: Sequence[TransactionInput],
        user_id: str,
    ) -> list[CategorizationResult]:
        """
        Results come back in input order. The first failure (override store
        error or timeout) propagates and the remaining items are cancelled.
        """
        if not transactions:
            return []

        semaphore = asyncio.Semaphore(self.concurrency)

        async def _run(transaction: TransactionInput) -> CategorizationResult:
            async with semaphore:
                return await self.predict(transaction, user_id)

        start = perf_counter()
        tasks = [asyncio.create_task(_run(transaction)) for transaction in transactions]
        try:
            results = await asyncio.gather(*tasks)
        except Exception:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        logger.info(
            "[BATCH] Categorized %s transactions for user '%s' in %.3fs.",
            len(results),
            user_id,
            perf_counter() - start,
        )
        return list(results)

    async def categorize_records(
        self,
        records: Sequence[dict[str, Any]],
        user_id: str,
    ) -> list[CategorizationResult]:
        """Categorize raw bank-data transaction records."""
        return await self.categorize_batch(
            [TransactionInput.from_plaid(record) for record in records],
            user_id,
        )
