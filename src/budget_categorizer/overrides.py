import asyncio
import json
import os
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any

from pydantic import TypeAdapter, ValidationError

from budget_categorizer.logger import get_logger
from budget_categorizer.models import UserOverride

logger = get_logger(__name__)

# user_id -> bucket -> key -> override entry
_DOCUMENT_ADAPTER = TypeAdapter(dict[str, dict[str, dict[str, dict[str, Any]]]])


class OverrideLookupError(RuntimeError):
    """The override store failed while reading or writing a user's corrections."""


class OverrideStore(ABC):
    """Per-user category corrections, keyed by merchant id or normalized name."""

    @abstractmethod
    async def get_by_merchant_id(self, user_id: str, merchant_id: str) -> UserOverride | None:
        pass

    @abstractmethod
    async def get_by_name(self, user_id: str, normalized_name: str) -> UserOverride | None:
        pass

    @abstractmethod
    async def set_by_merchant_id(self, user_id: str, merchant_id: str, category: str) -> None:
        pass

    @abstractmethod
    async def set_by_name(self, user_id: str, normalized_name: str, category: str) -> None:
        pass


class InMemoryOverrideStore(OverrideStore):
    def __init__(self) -> None:
        self.by_merchant_id: dict[tuple[str, str], UserOverride] = {}
        self.by_name: dict[tuple[str, str], UserOverride] = {}

    async def get_by_merchant_id(self, user_id: str, merchant_id: str) -> UserOverride | None:
        return self.by_merchant_id.get((user_id, merchant_id))

    async def get_by_name(self, user_id: str, normalized_name: str) -> UserOverride | None:
        return self.by_name.get((user_id, normalized_name))

    async def set_by_merchant_id(self, user_id: str, merchant_id: str, category: str) -> None:
        self.by_merchant_id[(user_id, merchant_id)] = UserOverride(category=category)

    async def set_by_name(self, user_id: str, normalized_name: str, category: str) -> None:
        self.by_name[(user_id, normalized_name)] = UserOverride(category=category)


class JsonOverrideStore(OverrideStore):
    """
    Overrides persisted to a single JSON document:

        {"<user_id>": {"merchant_ids": {...}, "names": {...}}}

    where each leaf is {"category": ..., "updated_at": ...}.
    """

    MERCHANT_IDS = "merchant_ids"
    NAMES = "names"

    def __init__(self, data_path: str = "overrides.json"):
        self.data_path = data_path
        self.data: dict[str, dict[str, dict[str, dict]]] = {}
        self._lock = asyncio.Lock()
        self.load()

    def load(self) -> None:
        if not os.path.exists(self.data_path):
            return
        try:
            with open(self.data_path, encoding="utf-8") as f:
                self.data = _DOCUMENT_ADAPTER.validate_python(json.load(f))
        except (json.JSONDecodeError, ValidationError):
            logger.warning("Override file %s is corrupted, starting empty.", self.data_path)
            self.data = {}

    def save(self) -> None:
        with open(self.data_path, "w", encoding="utf-8") as f:
            json.dump(self.data, f, indent=2)

    def _get(self, user_id: str, bucket: str, key: str) -> UserOverride | None:
        entry = self.data.get(user_id, {}).get(bucket, {}).get(key)
        if entry is None:
            return None
        try:
            return UserOverride.model_validate(entry)
        except ValidationError:
            logger.warning("Ignoring malformed override %s/%s/%s.", user_id, bucket, key)
            return None

    async def _set(self, user_id: str, bucket: str, key: str, category: str) -> None:
        override = UserOverride(category=category, updated_at=datetime.now(timezone.utc))
        async with self._lock:
            user_data = self.data.setdefault(user_id, {})
            user_data.setdefault(bucket, {})[key] = override.model_dump(mode="json")
            await asyncio.to_thread(self.save)

    async def get_by_merchant_id(self, user_id: str, merchant_id: str) -> UserOverride | None:
        return self._get(user_id, self.MERCHANT_IDS, merchant_id)

    async def get_by_name(self, user_id: str, normalized_name: str) -> UserOverride | None:
        return self._get(user_id, self.NAMES, normalized_name)

    async def set_by_merchant_id(self, user_id: str, merchant_id: str, category: str) -> None:
        await self._set(user_id, self.MERCHANT_IDS, merchant_id, category)

    async def set_by_name(self, user_id: str, normalized_name: str, category: str) -> None:
        await self._set(user_id, self.NAMES, normalized_name, category)
