"""HTTP tests for the user and employee routes over memory backends."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from hrledger.api.app import create_app
from hrledger.auth.passwords import hash_password
from hrledger.models.user import Role, UserAccount
from hrledger.persistence import Persistence
from tests.fakes import MemoryCacheBackend
from tests.fakes.sheets import csv_bytes, employee_row, xlsx_bytes

XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
PASSWORD = "s3cret-pass"


@pytest.fixture
def persistence(employees, users):
    return Persistence(employees, users, MemoryCacheBackend())


@pytest.fixture
def client(settings, persistence):
    with TestClient(create_app(settings, persistence)) as test_client:
        yield test_client


def _account(users, username: str, role: Role = Role.USER, verified: bool = True) -> UserAccount:
    return users.create(UserAccount(
        username=username, email=f"{username}@corp.example",
        password_hash=hash_password(PASSWORD), role=role, is_verified=verified,
    ))


def _login(client, user: UserAccount):
    resp = client.post("/api/user/login", json={"email": user.email, "password": PASSWORD})
    assert resp.status_code == 200, resp.text
    return resp


@pytest.fixture
def admin_client(client, users):
    _login(client, _account(users, "admin", role=Role.ADMIN))
    return client


def _upload(client, filename: str, data: bytes, content_type: str = "text/csv"):
    return client.post("/api/employee/create/bulk", files={"file": (filename, data, content_type)})


class TestHealth:
    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}

    def test_ready_reports_backend(self, client):
        assert client.get("/ready").json() == {"status": "ready", "backend": "memory"}


class TestUserRoutes:
    def test_signup_sets_cookie_but_login_waits_for_verification(self, client):
        resp = client.post("/api/user/signup", json={
            "username": "newbie", "email": "newbie@corp.example", "password": PASSWORD,
        })
        assert resp.status_code == 201
        assert "passwordHash" not in resp.json()["user"]
        assert "token" in resp.cookies

        resp = client.post("/api/user/login", json={"email": "newbie@corp.example", "password": PASSWORD})
        assert resp.status_code == 401
        assert resp.json() == {"success": False, "message": "You are not verified for the login"}

    def test_signup_validation_error_is_400(self, client):
        resp = client.post("/api/user/signup", json={"username": "abc", "email": "bad", "password": "x"})
        assert resp.status_code == 400
        assert resp.json()["success"] is False

    def test_me_and_logout(self, client, users):
        user = _account(users, "member")
        _login(client, user)
        assert client.get("/api/user/me").json()["user"]["id"] == user.id

        token = client.cookies.get("token")
        assert client.post("/api/user/logout").status_code == 200
        resp = client.get("/api/user/me", headers={"Cookie": f"token={token}"})
        assert resp.status_code == 401
        assert "logged out" in resp.json()["message"]

    def test_me_without_cookie(self, client):
        assert client.get("/api/user/me").status_code == 401


class TestBulkImportRoute:
    def test_requires_admin(self, client, users):
        _login(client, _account(users, "member"))
        resp = _upload(client, "staff.csv", csv_bytes([employee_row("E1")]))
        assert resp.status_code == 403

    def test_requires_session(self, client):
        assert _upload(client, "staff.csv", csv_bytes([employee_row("E1")])).status_code == 401

    def test_created(self, admin_client, users, upload_dir):
        linked = _account(users, "linked", verified=False)
        data = xlsx_bytes([employee_row("E1", linked.id), employee_row("E2")])
        resp = _upload(admin_client, "staff.xlsx", data, XLSX)

        assert resp.status_code == 201
        body = resp.json()
        assert body["success"] is True
        assert [e["employeeId"] for e in body["employees"]] == ["E1", "E2"]
        assert body["employees"][0]["employmentInfo"]["employmentType"] == "Full-time"
        assert body["unverifiedUserIds"] == []
        assert users.get(linked.id).is_verified
        assert list(upload_dir.iterdir()) == []

    def test_duplicate_is_409_with_committed_rows(self, admin_client, upload_dir):
        _upload(admin_client, "first.csv", csv_bytes([employee_row("E1")]))
        resp = _upload(admin_client, "second.csv", csv_bytes([employee_row("E1"), employee_row("E2")]))

        assert resp.status_code == 409
        body = resp.json()
        assert body["success"] is False
        assert [e["employeeId"] for e in body["employees"]] == ["E2"]
        assert body["failures"][0]["kind"] == "DUPLICATE"
        assert list(upload_dir.iterdir()) == []

    def test_missing_account_is_404(self, admin_client, employees):
        resp = _upload(admin_client, "staff.csv", csv_bytes([employee_row("E1", "ghost")]))
        assert resp.status_code == 404
        assert resp.json()["missingIds"] == ["ghost"]
        assert employees.list_all() == []

    def test_bad_content_type_is_400(self, admin_client):
        resp = _upload(admin_client, "staff.csv", b"Employee ID\nE1\n", "application/pdf")
        assert resp.status_code == 400
        assert resp.json()["message"] == "Only .xlsx and .csv files are allowed!"

    def test_oversize_upload_rejected_before_body_is_read(self, admin_client, settings, employees):
        settings.upload.max_upload_mb = 1
        data = csv_bytes([employee_row("E1")]) + b"x" * (1024 * 1024)
        with patch("starlette.datastructures.UploadFile.read", new_callable=AsyncMock) as read:
            resp = _upload(admin_client, "staff.csv", data)

        assert resp.status_code == 400
        assert resp.json()["message"] == "File too large. Maximum size: 1MB"
        assert read.await_count == 0
        assert employees.list_all() == []

    def test_parse_failure_is_400(self, admin_client):
        resp = _upload(admin_client, "staff.csv", b"Employee ID,Job Title\nE1\n")
        assert resp.status_code == 400
        assert resp.json()["message"].startswith("File parsing failed")


class TestEmployeeRoutes:
    def test_create_list_get_delete(self, admin_client):
        body = {
            "employeeId": "E9",
            "fullName": "Jane Doe",
            "dateOfBirth": "1990-05-01",
            "employmentInfo": {"jobTitle": "Analyst", "hireDate": "2021-03-15"},
            "contactInfo": {"workEmail": "e9@corp.example"},
        }
        assert admin_client.post("/api/employee/create", json=body).status_code == 201
        assert admin_client.post("/api/employee/create", json=body).status_code == 409

        listed = admin_client.get("/api/employee/all").json()["employees"]
        assert [e["employeeId"] for e in listed] == ["E9"]
        assert admin_client.get("/api/employee/E9").json()["employee"]["fullName"] == "Jane Doe"

        assert admin_client.delete("/api/employee/E9").status_code == 200
        assert admin_client.get("/api/employee/E9").status_code == 404

    def test_own_record(self, client, users, employees):
        admin = _account(users, "admin", role=Role.ADMIN)
        member = _account(users, "member")
        _login(client, admin)
        _upload(client, "staff.csv", csv_bytes([employee_row("E1", member.id)]))

        _login(client, member)
        resp = client.get("/api/employee/")
        assert resp.status_code == 200
        assert resp.json()["employee"]["employeeId"] == "E1"
