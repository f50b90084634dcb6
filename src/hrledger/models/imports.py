"""Bulk import result models.

The commit runs in two phases (insert, then verification of linked user
accounts); ``ImportResult`` keeps both outcomes so the verification phase can
be observed and retried on its own.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from hrledger.models.employee import EmployeeRecord


class FailureKind(StrEnum):
    DUPLICATE = "DUPLICATE"
    INVALID = "INVALID"
    INTERNAL = "INTERNAL"


class ItemFailure(BaseModel):
    """A single row that could not be inserted."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    row_number: Optional[int] = None
    employee_id: Optional[str] = None
    kind: FailureKind
    field: Optional[str] = None  # colliding field for DUPLICATE
    message: str = ""
    index: Optional[int] = Field(default=None, exclude=True)  # position in the insert batch


class BulkInsertOutcome(BaseModel):
    """What an unordered bulk insert managed to write."""

    inserted: list[EmployeeRecord] = Field(default_factory=list)
    failures: list[ItemFailure] = Field(default_factory=list)


class VerificationOutcome(BaseModel):
    """Result of marking one linked user account as verified."""

    user_id: str
    verified: bool = False
    error: str = ""


class ImportResult(BaseModel):
    """Composite outcome of a bulk commit."""

    inserted: list[EmployeeRecord] = Field(default_factory=list)
    failures: list[ItemFailure] = Field(default_factory=list)
    verifications: list[VerificationOutcome] = Field(default_factory=list)

    @property
    def has_failures(self) -> bool:
        return bool(self.failures)

    @property
    def unverified_user_ids(self) -> list[str]:
        return [v.user_id for v in self.verifications if not v.verified]

    def failures_of(self, kind: FailureKind) -> list[ItemFailure]:
        return [f for f in self.failures if f.kind == kind]
