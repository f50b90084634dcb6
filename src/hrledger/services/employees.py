"""Employee record service for single-record operations.

Bulk file imports go through ``hrledger.importing.service`` instead.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from hrledger.core.exceptions import (
    ConflictError,
    DuplicateRecord,
    NotFoundError,
    ValidationFailed,
)
from hrledger.core.protocols import IEmployeeStore, IUserRegistry
from hrledger.importing.commit import describe_validation_error
from hrledger.models.employee import EmployeeRecord

logger = logging.getLogger(__name__)

REQUIRED_MANUAL_FIELDS = ("fullName", "employeeId", "dateOfBirth", "employmentInfo", "contactInfo")


class EmployeeService:
    def __init__(self, employees: IEmployeeStore, users: IUserRegistry) -> None:
        self._employees = employees
        self._users = users

    def create(self, body: dict[str, Any]) -> EmployeeRecord:
        """Manual single-record entry; links and verifies ``userAccount`` when given."""
        if any(not body.get(name) for name in REQUIRED_MANUAL_FIELDS):
            raise ValidationFailed("Missing required fields for manual entry.")
        try:
            record = EmployeeRecord.from_wire(body)
        except ValidationError as exc:
            raise ValidationFailed(f"Invalid employee record: {describe_validation_error(exc)}") from exc

        if record.user_account and not self._users.find_by_ids([record.user_account]):
            raise NotFoundError("User account not found.")

        try:
            created = self._employees.insert(record)
        except DuplicateRecord as exc:
            raise ConflictError(f"Duplicate employee ID or email found: {exc.field}") from exc

        if created.user_account:
            self._users.set_verified(created.user_account)
        logger.info("Created employee %s", created.employee_id)
        return created

    def list_all(self) -> list[EmployeeRecord]:
        return self._employees.list_all()

    def get(self, employee_id: str) -> EmployeeRecord:
        record = self._employees.get(employee_id)
        if record is None:
            raise NotFoundError(f"Employee {employee_id} not found")
        return record

    def get_for_user(self, user_id: str) -> EmployeeRecord:
        record = self._employees.find_by_user_account(user_id)
        if record is None:
            raise NotFoundError("No employee record is linked to this user")
        return record

    def delete(self, employee_id: str) -> None:
        if not self._employees.delete(employee_id):
            raise NotFoundError(f"Employee {employee_id} not found")
        logger.info("Deleted employee %s", employee_id)
