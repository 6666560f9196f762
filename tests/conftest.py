"""Shared fixtures: a store double whose writes always fail."""

from typing import Any, Optional

import pytest

from memory.kv_store import KeyValueStore, StoreResult


class FailingStore(KeyValueStore):
    """Reads find nothing and every write reports a failure."""

    def __init__(self) -> None:
        self.write_attempts = 0

    def get(self, key: str) -> Optional[Any]:
        return None

    def set(self, key: str, value: Any) -> StoreResult:
        self.write_attempts += 1
        return StoreResult.failure("disk unavailable")

    def delete(self, key: str) -> StoreResult:
        return StoreResult.failure("disk unavailable")


@pytest.fixture
def failing_store() -> FailingStore:
    return FailingStore()
