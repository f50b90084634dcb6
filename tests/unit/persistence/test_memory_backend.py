"""Unit tests for the in-memory backends."""

from __future__ import annotations

from datetime import date

import pytest

from hrledger.core.exceptions import DuplicateRecord, NotFoundError
from hrledger.models.employee import ContactInfo, EmployeeRecord, EmploymentInfo
from hrledger.models.imports import FailureKind
from hrledger.models.user import UserAccount
from hrledger.persistence.memory_backend import MemoryEmployeeStore, MemoryUserRegistry


def _employee(employee_id: str, email: str | None = None, phone: str | None = None,
              user_id: str | None = None) -> EmployeeRecord:
    return EmployeeRecord(
        employee_id=employee_id,
        user_account=user_id,
        full_name=f"Employee {employee_id}",
        date_of_birth=date(1990, 1, 1),
        employment_info=EmploymentInfo(job_title="Dev", hire_date=date(2020, 1, 1)),
        contact_info=ContactInfo(
            work_email=email or f"{employee_id.lower()}@corp.example",
            work_phone_number=phone,
        ),
    )


class TestMemoryEmployeeStore:
    def test_insert_stamps_timestamps(self):
        store = MemoryEmployeeStore()
        stored = store.insert(_employee("E1"))
        assert stored.created_at is not None
        assert store.get("E1") == stored

    @pytest.mark.parametrize("clash, field", [
        (_employee("E1", email="other@corp.example"), "employeeId"),
        (_employee("E2", email="e1@corp.example"), "contactInfo.workEmail"),
        (_employee("E2", phone="555-0100"), "contactInfo.workPhoneNumber"),
    ])
    def test_unique_fields(self, clash, field):
        store = MemoryEmployeeStore()
        store.insert(_employee("E1", phone="555-0100"))
        with pytest.raises(DuplicateRecord) as err:
            store.insert(clash)
        assert err.value.field == field

    def test_insert_many_unordered_continues(self):
        store = MemoryEmployeeStore()
        outcome = store.insert_many([_employee("E1"), _employee("E1"), _employee("E2")])
        assert [r.employee_id for r in outcome.inserted] == ["E1", "E2"]
        assert [(f.index, f.kind) for f in outcome.failures] == [(1, FailureKind.DUPLICATE)]

    def test_insert_many_ordered_stops(self):
        store = MemoryEmployeeStore()
        outcome = store.insert_many([_employee("E1"), _employee("E1"), _employee("E2")], ordered=True)
        assert [r.employee_id for r in outcome.inserted] == ["E1"]

    def test_delete_releases_unique_values(self):
        store = MemoryEmployeeStore()
        store.insert(_employee("E1", phone="555-0100"))
        assert store.delete("E1") is True
        assert store.delete("E1") is False
        store.insert(_employee("E2", email="e1@corp.example", phone="555-0100"))

    def test_find_by_user_account(self):
        store = MemoryEmployeeStore()
        store.insert(_employee("E1", user_id="u1"))
        assert store.find_by_user_account("u1").employee_id == "E1"
        assert store.find_by_user_account("u2") is None


class TestMemoryUserRegistry:
    def test_email_and_username_unique(self):
        registry = MemoryUserRegistry()
        registry.create(UserAccount(username="alice1", email="alice@corp.example"))
        with pytest.raises(DuplicateRecord):
            registry.create(UserAccount(username="alice2", email="Alice@Corp.example"))
        with pytest.raises(DuplicateRecord):
            registry.create(UserAccount(username="alice1", email="other@corp.example"))

    def test_find_by_ids_skips_unknown(self):
        registry = MemoryUserRegistry()
        user = registry.create(UserAccount(username="alice1", email="alice@corp.example"))
        assert [u.id for u in registry.find_by_ids([user.id, "ghost", user.id])] == [user.id]

    def test_set_verified(self):
        registry = MemoryUserRegistry()
        user = registry.create(UserAccount(username="alice1", email="alice@corp.example"))
        assert registry.set_verified(user.id) is True
        assert registry.set_verified(user.id) is True
        assert registry.get(user.id).is_verified
        assert registry.set_verified("ghost") is False

    def test_update_unknown_user(self):
        with pytest.raises(NotFoundError):
            MemoryUserRegistry().update(UserAccount(username="alice1", email="alice@corp.example"))
