import asyncio

import pytest

from budget_categorizer.manager import CategorizerService
from budget_categorizer.models import TransactionInput, UserOverride
from budget_categorizer.overrides import InMemoryOverrideStore, OverrideLookupError
from budget_categorizer.services.categorization import CategorizationPipeline


class SlowStore(InMemoryOverrideStore):
    def __init__(self, delay: float = 0.01) -> None:
        super().__init__()
        self.delay = delay
        self.active = 0
        self.max_active = 0

    async def get_by_name(self, user_id: str, normalized_name: str) -> UserOverride | None:
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await asyncio.sleep(self.delay)
            return await super().get_by_name(user_id, normalized_name)
        finally:
            self.active -= 1


class BrokenStore(InMemoryOverrideStore):
    async def get_by_name(self, user_id: str, normalized_name: str) -> UserOverride | None:
        if normalized_name == "broken":
            raise ConnectionError("store unreachable")
        return None


@pytest.mark.anyio
async def test_batch_preserves_order() -> None:
    pipeline = CategorizationPipeline(CategorizerService(override_store=SlowStore()), concurrency=3)
    transactions = [
        TransactionInput(amount=45.0, merchant_name="STARBUCKS STORE #123"),
        TransactionInput(amount=-2500.0, merchant_name="ACME PAYROLL"),
        TransactionInput(amount=60.0, merchant_name="Zelle transfer to John"),
        TransactionInput(amount=19.99, merchant_name="RANDOM UNMATCHED MERCHANT XYZ"),
    ]

    results = await pipeline.categorize_batch(transactions, "u1")

    assert [r.category for r in results] == ["Food", "Salary", "Transfers Out", "Other Expenses"]


@pytest.mark.anyio
async def test_batch_respects_concurrency_limit() -> None:
    store = SlowStore()
    pipeline = CategorizationPipeline(CategorizerService(override_store=store), concurrency=2)
    transactions = [TransactionInput(amount=1.0, merchant_name=f"Shop {i}") for i in range(6)]

    results = await pipeline.categorize_batch(transactions, "u1")

    assert len(results) == 6
    assert store.max_active <= 2


@pytest.mark.anyio
async def test_empty_batch() -> None:
    pipeline = CategorizationPipeline(CategorizerService(override_store=InMemoryOverrideStore()))
    assert await pipeline.categorize_batch([], "u1") == []


@pytest.mark.anyio
async def test_batch_propagates_store_failure() -> None:
    pipeline = CategorizationPipeline(CategorizerService(override_store=BrokenStore()))
    transactions = [
        TransactionInput(amount=1.0, merchant_name="fine"),
        TransactionInput(amount=1.0, merchant_name="broken"),
    ]
    with pytest.raises(OverrideLookupError):
        await pipeline.categorize_batch(transactions, "u1")


@pytest.mark.anyio
async def test_predict_timeout() -> None:
    pipeline = CategorizationPipeline(
        CategorizerService(override_store=SlowStore(delay=1.0)),
        timeout=0.01,
    )
    with pytest.raises(asyncio.TimeoutError):
        await pipeline.predict(TransactionInput(amount=1.0, merchant_name="slow"), "u1")


def test_concurrency_must_be_positive() -> None:
    with pytest.raises(ValueError):
        CategorizationPipeline(CategorizerService(override_store=InMemoryOverrideStore()), concurrency=0)


@pytest.mark.anyio
async def test_categorize_raw_records() -> None:
    pipeline = CategorizationPipeline(CategorizerService(override_store=InMemoryOverrideStore()))
    records = [
        {
            "amount": 12.5,
            "merchant_name": None,
            "name": "Uber 063015 SF**POOL**",
            "personal_finance_category": {"primary": "TRANSPORTATION", "detailed": "TRANSPORTATION_TAXIS_AND_RIDE_SHARES"},
        },
        {"amount": "-1500", "name": "Gusto Payroll", "merchant_id": "m_gusto"},
        {"amount": None, "transaction_code": "return"},
    ]

    results = await pipeline.categorize_records(records, "u1")

    assert results[0].category == "Transportation"
    assert results[0].reason == "plaid:TRANSPORTATION_TAXIS_AND_RIDE_SHARES"
    assert results[1].category == "Salary"
    assert results[1].type == "income"
    assert results[2].category == "Adjustments"
    assert results[2].reason == "transaction_code"
