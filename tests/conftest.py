"""Shared fixtures: settings with a private upload dir and memory backends."""

from __future__ import annotations

import pytest

from hrledger.core.config import AppSettings, UploadConfig
from hrledger.models.user import UserAccount
from tests.fakes import FlakyUserRegistry, MemoryEmployeeStore


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def settings(upload_dir):
    return AppSettings(upload=UploadConfig(upload_dir=str(upload_dir)))


@pytest.fixture
def employees():
    return MemoryEmployeeStore()


@pytest.fixture
def users():
    return FlakyUserRegistry()


@pytest.fixture
def alice(users):
    return users.create(UserAccount(username="alice1", email="alice@corp.example"))


@pytest.fixture
def bob(users):
    return users.create(UserAccount(username="bobby", email="bob@corp.example"))
