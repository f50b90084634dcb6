"""Protocol interfaces for hrledger persistence collaborators.

Services depend only on these Protocols; DynamoDB, Redis and in-memory
backends satisfy them structurally.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from hrledger.models.employee import EmployeeRecord
from hrledger.models.imports import BulkInsertOutcome
from hrledger.models.user import UserAccount


# ---------------------------------------------------------------------------
# Persistence: User Registry
# ---------------------------------------------------------------------------

@runtime_checkable
class IUserRegistry(Protocol):
    """User accounts keyed by id, unique on email and username."""

    def create(self, user: UserAccount) -> UserAccount: ...

    def get(self, user_id: str) -> UserAccount | None: ...

    def find_by_email(self, email: str) -> UserAccount | None: ...

    def find_by_ids(self, user_ids: list[str]) -> list[UserAccount]: ...

    def set_verified(self, user_id: str) -> bool: ...

    def update(self, user: UserAccount) -> UserAccount: ...


# ---------------------------------------------------------------------------
# Persistence: Employee Store
# ---------------------------------------------------------------------------

@runtime_checkable
class IEmployeeStore(Protocol):
    """Employee records keyed by employeeId, unique on workEmail and workPhoneNumber."""

    def insert(self, record: EmployeeRecord) -> EmployeeRecord: ...

    def insert_many(
        self, records: list[EmployeeRecord], ordered: bool = False
    ) -> BulkInsertOutcome: ...

    def get(self, employee_id: str) -> EmployeeRecord | None: ...

    def find_by_user_account(self, user_id: str) -> EmployeeRecord | None: ...

    def list_all(self) -> list[EmployeeRecord]: ...

    def delete(self, employee_id: str) -> bool: ...


# ---------------------------------------------------------------------------
# Persistence: Cache Backend
# ---------------------------------------------------------------------------

@runtime_checkable
class ICacheBackend(Protocol):
    """Redis-compatible cache interface."""

    def get(self, key: str) -> str | None: ...

    def setex(self, key: str, ttl: int, value: str) -> None: ...

    def delete(self, key: str) -> None: ...

    def exists(self, key: str) -> bool: ...
