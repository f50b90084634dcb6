"""Bulk commit coordinator: unordered insert, then best-effort account verification.

The two phases are not transactionally linked: if the process dies between
them the employees exist but their accounts stay unverified. ``verify`` can be
re-run on its own for the inserted records.
"""

from __future__ import annotations

import asyncio
import logging

from pydantic import ValidationError

from hrledger.core.exceptions import DuplicateKey, InternalCommitFailure, InvalidRecords
from hrledger.core.protocols import IEmployeeStore, IUserRegistry
from hrledger.importing.normalizer import EmployeeDraft
from hrledger.models.employee import EmployeeRecord
from hrledger.models.imports import (
    BulkInsertOutcome,
    FailureKind,
    ImportResult,
    ItemFailure,
    VerificationOutcome,
)

logger = logging.getLogger(__name__)


def describe_validation_error(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"])
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


class BulkCommitCoordinator:
    """Writes a validated batch and marks linked user accounts verified."""

    def __init__(self, employees: IEmployeeStore, users: IUserRegistry) -> None:
        self._employees = employees
        self._users = users

    async def commit(self, drafts: list[EmployeeDraft]) -> ImportResult:
        outcome = await self.insert(drafts)
        verifications = await self.verify(outcome.inserted)
        result = ImportResult(
            inserted=outcome.inserted,
            failures=outcome.failures,
            verifications=verifications,
        )
        logger.info(
            "Bulk commit: %d inserted, %d failed, %d accounts verified",
            len(result.inserted), len(result.failures),
            sum(1 for v in verifications if v.verified),
        )
        return result

    async def insert(self, drafts: list[EmployeeDraft]) -> BulkInsertOutcome:
        """Validate drafts and insert the valid ones, continuing past failures."""
        records: list[EmployeeRecord] = []
        rows_by_record: list[int] = []
        invalid: list[ItemFailure] = []

        for draft in drafts:
            try:
                record = EmployeeRecord.model_validate(draft.fields)
            except ValidationError as exc:
                invalid.append(ItemFailure(
                    row_number=draft.row_number,
                    employee_id=draft.employee_id,
                    kind=FailureKind.INVALID,
                    message=describe_validation_error(exc),
                ))
                continue
            records.append(record)
            rows_by_record.append(draft.row_number)

        if records:
            outcome = await asyncio.to_thread(self._employees.insert_many, records, False)
        else:
            outcome = BulkInsertOutcome()

        # Stores report failures by batch position; map back to the file row.
        for failure in outcome.failures:
            if failure.index is not None and failure.index < len(rows_by_record):
                failure.row_number = rows_by_record[failure.index]

        failures = sorted(invalid + outcome.failures, key=lambda f: f.row_number or 0)
        return BulkInsertOutcome(inserted=outcome.inserted, failures=failures)

    async def verify(self, records: list[EmployeeRecord]) -> list[VerificationOutcome]:
        """Mark every linked account verified, concurrently. Never raises."""
        user_ids = [r.user_account for r in records if r.user_account]
        if not user_ids:
            return []
        return list(await asyncio.gather(*(self._verify_one(uid) for uid in user_ids)))

    async def _verify_one(self, user_id: str) -> VerificationOutcome:
        try:
            verified = await asyncio.to_thread(self._users.set_verified, user_id)
        except Exception as exc:  # compensating update is best-effort
            logger.error("Verification update failed for user %s: %s", user_id, exc)
            return VerificationOutcome(user_id=user_id, verified=False, error=str(exc))
        if not verified:
            return VerificationOutcome(user_id=user_id, verified=False, error="user not found")
        return VerificationOutcome(user_id=user_id, verified=True)


def raise_for_failures(result: ImportResult) -> ImportResult:
    """Translate per-item failures into the pipeline's error taxonomy."""
    internal = result.failures_of(FailureKind.INTERNAL)
    if internal:
        raise InternalCommitFailure(
            f"File processing failed: {internal[0].message}", result
        )
    duplicates = result.failures_of(FailureKind.DUPLICATE)
    if duplicates:
        ids = ", ".join(f.employee_id or "?" for f in duplicates)
        raise DuplicateKey(
            f"Duplicate employee ID, work email or work phone found in file: {ids}. "
            f"{len(result.inserted)} employees created",
            result,
        )
    invalid = result.failures_of(FailureKind.INVALID)
    if invalid:
        rows = ", ".join(str(f.row_number) for f in invalid)
        raise InvalidRecords(
            f"Missing or invalid fields in rows: {rows}. {len(result.inserted)} employees created",
            result,
        )
    return result
