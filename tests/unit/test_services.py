"""Tests for the user and employee services."""

from __future__ import annotations

import pytest

from hrledger.auth.passwords import hash_password
from hrledger.core.exceptions import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ValidationFailed,
)
from hrledger.models.user import LoginRequest, SignupRequest, UserAccount, UserUpdateRequest
from hrledger.services import EmployeeService, UserService


def _body(employee_id: str = "E1", **overrides):
    body = {
        "employeeId": employee_id,
        "fullName": "Jane Doe",
        "dateOfBirth": "1990-05-01",
        "employmentInfo": {"jobTitle": "Analyst", "hireDate": "2021-03-15"},
        "contactInfo": {"workEmail": f"{employee_id.lower()}@corp.example"},
    }
    body.update(overrides)
    return body


class TestUserService:
    def test_register_hashes_password(self, users):
        created = UserService(users).register(
            SignupRequest(username="Alice1", email="Alice@Corp.example", password="s3cret-pass"),
        )
        assert created.username == "alice1"
        assert created.email == "alice@corp.example"
        assert created.password_hash and created.password_hash != "s3cret-pass"
        assert created.is_verified is False

    def test_unverified_login_rejected(self, users):
        service = UserService(users)
        service.register(SignupRequest(username="alice1", email="alice@corp.example", password="s3cret-pass"))
        with pytest.raises(AuthenticationError, match="not verified"):
            service.login(LoginRequest(email="alice@corp.example", password="s3cret-pass"))

    def test_verified_login(self, users):
        user = users.create(UserAccount(username="alice1", email="alice@corp.example",
                                        password_hash=hash_password("s3cret-pass"), is_verified=True))
        logged_in = UserService(users).login(LoginRequest(email="ALICE@corp.example", password="s3cret-pass"))
        assert logged_in.id == user.id

    def test_wrong_password(self, users):
        users.create(UserAccount(username="alice1", email="alice@corp.example",
                                 password_hash=hash_password("s3cret-pass"), is_verified=True))
        with pytest.raises(AuthenticationError):
            UserService(users).login(LoginRequest(email="alice@corp.example", password="nope-nope"))

    def test_update_username(self, users, alice):
        updated = UserService(users).update(alice.id, UserUpdateRequest(username="AliceNew"))
        assert updated.username == "alicenew"

    def test_get_unknown(self, users):
        with pytest.raises(NotFoundError):
            UserService(users).get("ghost")


class TestEmployeeService:
    def test_create_links_and_verifies(self, employees, users, alice):
        record = EmployeeService(employees, users).create(_body(userAccount=alice.id))
        assert record.user_account == alice.id
        assert users.get(alice.id).is_verified

    def test_missing_required_fields(self, employees, users):
        with pytest.raises(ValidationFailed):
            EmployeeService(employees, users).create(_body(contactInfo=None))

    def test_invalid_enum(self, employees, users):
        with pytest.raises(ValidationFailed):
            EmployeeService(employees, users).create(_body(gender="Unknown"))

    def test_unknown_account(self, employees, users):
        with pytest.raises(NotFoundError, match="User account not found"):
            EmployeeService(employees, users).create(_body(userAccount="ghost"))

    def test_duplicate(self, employees, users):
        service = EmployeeService(employees, users)
        service.create(_body())
        with pytest.raises(ConflictError):
            service.create(_body())

    def test_get_for_user_and_delete(self, employees, users, alice):
        service = EmployeeService(employees, users)
        service.create(_body(userAccount=alice.id))
        assert service.get_for_user(alice.id).employee_id == "E1"
        service.delete("E1")
        with pytest.raises(NotFoundError):
            service.get("E1")
        with pytest.raises(NotFoundError):
            service.delete("E1")
