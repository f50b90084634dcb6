"""In-memory backends for unit tests and local runs (dict-backed)."""

from __future__ import annotations

import threading
from datetime import datetime, timezone

from hrledger.core.exceptions import DuplicateRecord, NotFoundError
from hrledger.models.employee import EmployeeRecord
from hrledger.models.imports import BulkInsertOutcome, FailureKind, ItemFailure
from hrledger.models.user import UserAccount


def _now() -> datetime:
    return datetime.now(timezone.utc)


class MemoryEmployeeStore:
    """Dict-backed IEmployeeStore enforcing the same unique fields as DynamoDB."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: dict[str, EmployeeRecord] = {}
        self._work_emails: dict[str, str] = {}
        self._work_phones: dict[str, str] = {}

    def insert(self, record: EmployeeRecord) -> EmployeeRecord:
        with self._lock:
            contact = record.contact_info
            if record.employee_id in self._records:
                raise DuplicateRecord("employeeId", record.employee_id)
            if contact.work_email in self._work_emails:
                raise DuplicateRecord("contactInfo.workEmail", contact.work_email)
            phone = contact.work_phone_number
            if phone and phone in self._work_phones:
                raise DuplicateRecord("contactInfo.workPhoneNumber", phone)

            now = _now()
            stored = record.model_copy(update={"created_at": now, "updated_at": now}, deep=True)
            self._records[stored.employee_id] = stored
            self._work_emails[contact.work_email] = stored.employee_id
            if phone:
                self._work_phones[phone] = stored.employee_id
            return stored.model_copy(deep=True)

    def insert_many(self, records: list[EmployeeRecord], ordered: bool = False) -> BulkInsertOutcome:
        outcome = BulkInsertOutcome()
        for idx, record in enumerate(records):
            try:
                outcome.inserted.append(self.insert(record))
            except DuplicateRecord as exc:
                outcome.failures.append(ItemFailure(
                    index=idx,
                    employee_id=record.employee_id,
                    kind=FailureKind.DUPLICATE,
                    field=exc.field,
                    message=exc.message,
                ))
                if ordered:
                    break
        return outcome

    def get(self, employee_id: str) -> EmployeeRecord | None:
        record = self._records.get(employee_id)
        return record.model_copy(deep=True) if record else None

    def find_by_user_account(self, user_id: str) -> EmployeeRecord | None:
        for record in self._records.values():
            if record.user_account == user_id:
                return record.model_copy(deep=True)
        return None

    def list_all(self) -> list[EmployeeRecord]:
        return [r.model_copy(deep=True) for r in self._records.values()]

    def delete(self, employee_id: str) -> bool:
        with self._lock:
            record = self._records.pop(employee_id, None)
            if record is None:
                return False
            self._work_emails.pop(record.contact_info.work_email, None)
            if record.contact_info.work_phone_number:
                self._work_phones.pop(record.contact_info.work_phone_number, None)
            return True


class MemoryUserRegistry:
    """Dict-backed IUserRegistry, unique on email and username."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._users: dict[str, UserAccount] = {}

    def _check_unique(self, user: UserAccount) -> None:
        for other in self._users.values():
            if other.id == user.id:
                continue
            if other.email == user.email:
                raise DuplicateRecord("email", user.email)
            if other.username == user.username:
                raise DuplicateRecord("username", user.username)

    def create(self, user: UserAccount) -> UserAccount:
        with self._lock:
            if user.id in self._users:
                raise DuplicateRecord("id", user.id)
            self._check_unique(user)
            now = _now()
            stored = user.model_copy(update={"created_at": now, "updated_at": now})
            self._users[stored.id] = stored
            return stored.model_copy()

    def get(self, user_id: str) -> UserAccount | None:
        user = self._users.get(user_id)
        return user.model_copy() if user else None

    def find_by_email(self, email: str) -> UserAccount | None:
        email = email.strip().lower()
        for user in self._users.values():
            if user.email == email:
                return user.model_copy()
        return None

    def find_by_ids(self, user_ids: list[str]) -> list[UserAccount]:
        return [
            self._users[uid].model_copy()
            for uid in dict.fromkeys(user_ids)
            if uid in self._users
        ]

    def set_verified(self, user_id: str) -> bool:
        with self._lock:
            user = self._users.get(user_id)
            if user is None:
                return False
            self._users[user_id] = user.model_copy(update={"is_verified": True, "updated_at": _now()})
            return True

    def update(self, user: UserAccount) -> UserAccount:
        with self._lock:
            if user.id not in self._users:
                raise NotFoundError(f"User {user.id} does not exist")
            self._check_unique(user)
            stored = user.model_copy(update={"updated_at": _now()})
            self._users[stored.id] = stored
            return stored.model_copy()


class MemoryCacheBackend:
    """Dict-backed ICacheBackend for unit tests."""

    def __init__(self) -> None:
        self._store: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._store.get(key)

    def setex(self, key: str, ttl: int, value: str) -> None:
        self._store[key] = value

    def delete(self, key: str) -> None:
        self._store.pop(key, None)

    def exists(self, key: str) -> bool:
        return key in self._store
