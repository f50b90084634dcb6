"""Shared test doubles: memory backends plus stores that fail on purpose."""

from __future__ import annotations

from hrledger.core.exceptions import StoreError
from hrledger.models.employee import EmployeeRecord
from hrledger.models.imports import BulkInsertOutcome, FailureKind, ItemFailure
from hrledger.persistence.memory_backend import (
    MemoryCacheBackend,
    MemoryEmployeeStore,
    MemoryUserRegistry,
)


class FaultyEmployeeStore(MemoryEmployeeStore):
    """Reports an INTERNAL failure for the employee ids in ``fail_ids``."""

    def __init__(self, fail_ids: set[str]) -> None:
        super().__init__()
        self.fail_ids = fail_ids

    def insert_many(self, records: list[EmployeeRecord], ordered: bool = False) -> BulkInsertOutcome:
        outcome = BulkInsertOutcome()
        for idx, record in enumerate(records):
            if record.employee_id in self.fail_ids:
                outcome.failures.append(ItemFailure(
                    index=idx, employee_id=record.employee_id,
                    kind=FailureKind.INTERNAL, message="write timed out",
                ))
                continue
            outcome.inserted.append(self.insert(record))
        return outcome


class ExplodingEmployeeStore(MemoryEmployeeStore):
    def insert_many(self, records: list[EmployeeRecord], ordered: bool = False) -> BulkInsertOutcome:
        raise RuntimeError("connection reset")


class FlakyUserRegistry(MemoryUserRegistry):
    """``set_verified`` raises for the user ids in ``fail_ids``."""

    def __init__(self, fail_ids: set[str] | None = None) -> None:
        super().__init__()
        self.fail_ids = fail_ids or set()
        self.verify_calls: list[str] = []
        self.lookup_calls = 0

    def find_by_ids(self, user_ids):
        self.lookup_calls += 1
        return super().find_by_ids(user_ids)

    def set_verified(self, user_id: str) -> bool:
        self.verify_calls.append(user_id)
        if user_id in self.fail_ids:
            raise StoreError(f"update of {user_id} timed out")
        return super().set_verified(user_id)


__all__ = [
    "ExplodingEmployeeStore",
    "FaultyEmployeeStore",
    "FlakyUserRegistry",
    "MemoryCacheBackend",
    "MemoryEmployeeStore",
    "MemoryUserRegistry",
]
