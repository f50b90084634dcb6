"""Employee record, the canonical unit the import pipeline produces.

Python attributes are snake_case; the wire format (API bodies, stored items,
and import field paths) uses the camelCase aliases, e.g.
``employmentInfo.hireDate``.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import StrEnum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Gender(StrEnum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


class Department(StrEnum):
    WEB_DEV = "Web-Dev"
    MOBILE_DEV = "Mobile-Dev"
    DATA_ANALYST = "Data-Analyst"
    HR = "HR"


class EmploymentType(StrEnum):
    FULL_TIME = "Full-time"
    PART_TIME = "Part-time"
    CONTRACT = "Contract"
    INTERN = "Intern"


class EmploymentStatus(StrEnum):
    ACTIVE = "Active"
    ON_LEAVE = "On Leave"
    TERMINATED = "Terminated"


class _WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class EmploymentInfo(_WireModel):
    """Job placement of an employee."""

    job_title: str = Field(min_length=1)
    manager: Optional[str] = None  # employeeId of the manager
    department: Optional[Department] = None
    hire_date: date
    employment_type: EmploymentType = EmploymentType.FULL_TIME
    status: EmploymentStatus = EmploymentStatus.ACTIVE
    termination_date: Optional[date] = None


class ContactInfo(_WireModel):
    """Addresses and phone numbers; work email and work phone are unique."""

    home_address: Optional[str] = None
    personal_phone_number: Optional[str] = None
    work_phone_number: Optional[str] = None
    personal_email: Optional[str] = None
    work_email: str = Field(min_length=1)


class EmployeeRecord(_WireModel):
    """Single employee record."""

    # --- Identity ---
    employee_id: str = Field(min_length=1)
    user_account: Optional[str] = None

    # --- Personal ---
    full_name: str = Field(min_length=1)
    date_of_birth: date
    gender: Optional[Gender] = None
    nationality: Optional[str] = None
    photo_url: Optional[str] = None

    employment_info: EmploymentInfo
    contact_info: ContactInfo

    # --- Set by the store ---
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_wire(self) -> dict[str, Any]:
        """JSON-ready dict using the camelCase field names, absent values omitted."""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> EmployeeRecord:
        return cls.model_validate(data)
