import json
from pathlib import Path

import pytest

from budget_categorizer.overrides import InMemoryOverrideStore, JsonOverrideStore


@pytest.fixture
def json_store(tmp_path: Path) -> JsonOverrideStore:
    return JsonOverrideStore(data_path=str(tmp_path / "overrides.json"))


@pytest.mark.anyio
async def test_json_store_persists_overrides(json_store: JsonOverrideStore, tmp_path: Path) -> None:
    await json_store.set_by_merchant_id("u1", "mid_1", "Food")
    await json_store.set_by_name("u1", "pizza palace", "Entertainment")

    # New instance pointing to the same file
    reloaded = JsonOverrideStore(data_path=str(tmp_path / "overrides.json"))

    by_id = await reloaded.get_by_merchant_id("u1", "mid_1")
    by_name = await reloaded.get_by_name("u1", "pizza palace")
    assert by_id is not None and by_id.category == "Food"
    assert by_name is not None and by_name.category == "Entertainment"
    assert by_id.updated_at.tzinfo is not None


@pytest.mark.anyio
async def test_json_store_latest_write_wins(json_store: JsonOverrideStore) -> None:
    await json_store.set_by_merchant_id("u1", "mid_1", "Food")
    await json_store.set_by_merchant_id("u1", "mid_1", "Shopping")
    override = await json_store.get_by_merchant_id("u1", "mid_1")
    assert override is not None
    assert override.category == "Shopping"


@pytest.mark.anyio
async def test_json_store_is_scoped_per_user(json_store: JsonOverrideStore) -> None:
    await json_store.set_by_name("u1", "starbucks", "Business")
    assert await json_store.get_by_name("u2", "starbucks") is None
    assert await json_store.get_by_merchant_id("u1", "starbucks") is None


@pytest.mark.anyio
async def test_json_store_corrupted_file_starts_empty(tmp_path: Path) -> None:
    path = tmp_path / "overrides.json"
    path.write_text("{broken", encoding="utf-8")
    store = JsonOverrideStore(data_path=str(path))
    assert store.data == {}
    assert await store.get_by_name("u1", "anything") is None


@pytest.mark.anyio
async def test_json_store_wrong_shape_starts_empty(tmp_path: Path) -> None:
    path = tmp_path / "overrides.json"
    path.write_text(json.dumps({"u1": {"names": ["oops"]}}), encoding="utf-8")
    store = JsonOverrideStore(data_path=str(path))
    assert store.data == {}
    assert await store.get_by_name("u1", "starbucks") is None

    await store.set_by_name("u1", "starbucks", "Food")
    override = await store.get_by_name("u1", "starbucks")
    assert override is not None and override.category == "Food"


@pytest.mark.anyio
async def test_json_store_ignores_malformed_entries(tmp_path: Path) -> None:
    path = tmp_path / "overrides.json"
    path.write_text(json.dumps({"u1": {"names": {"shop": {"updated_at": "yesterday"}}}}), encoding="utf-8")
    store = JsonOverrideStore(data_path=str(path))
    assert await store.get_by_name("u1", "shop") is None


@pytest.mark.anyio
async def test_in_memory_store_round_trip() -> None:
    store = InMemoryOverrideStore()
    assert await store.get_by_merchant_id("u1", "mid") is None
    await store.set_by_merchant_id("u1", "mid", "Rent")
    override = await store.get_by_merchant_id("u1", "mid")
    assert override is not None
    assert override.category == "Rent"
