"""User account models."""

from __future__ import annotations

import re
import uuid
from datetime import datetime
from enum import StrEnum
from typing import Annotated, Any, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

EMAIL_PATTERN = re.compile(
    r"^[^<>()\[\]\\.,;:\s@\"]+(\.[^<>()\[\]\\.,;:\s@\"]+)*@([a-zA-Z\-0-9]+\.)+[a-zA-Z]{2,}$"
)


class Role(StrEnum):
    USER = "USER"
    DEVELOPER = "DEVELOPER"
    TEAMLEAD = "TEAMLEAD"
    HR = "HR"
    ADMIN = "ADMIN"


def _new_user_id() -> str:
    return uuid.uuid4().hex


def _check_email(value: str) -> str:
    value = value.strip().lower()
    if not EMAIL_PATTERN.match(value):
        raise ValueError("Please fill in a valid email address")
    return value


def _check_username(value: str) -> str:
    value = value.strip().lower()
    if len(value) < 5:
        raise ValueError("username must be at least 5 characters")
    return value


Email = Annotated[str, AfterValidator(_check_email)]
Username = Annotated[str, AfterValidator(_check_username)]


class UserAccount(BaseModel):
    """A registered user. ``password_hash`` never leaves the service layer."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(default_factory=_new_user_id)
    username: Username
    email: Email
    password_hash: str = ""
    role: Role = Role.USER
    is_verified: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(
            by_alias=True, mode="json", exclude={"password_hash"}, exclude_none=True
        )


class SignupRequest(BaseModel):
    username: Username
    email: Email
    password: str = Field(min_length=8)


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def _lower(cls, value: str) -> str:
        return value.strip().lower()


class UserUpdateRequest(BaseModel):
    username: Optional[Username] = None
    email: Optional[Email] = None
