"""hrledger exception hierarchy.

Every error carries the HTTP status the API layer renders it with.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from hrledger.models.imports import ImportResult


class HRLedgerError(Exception):
    """Base exception for all hrledger errors."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)

    def payload(self) -> dict[str, Any]:
        """Extra envelope fields rendered next to ``message``."""
        return {}


# ---------------------------------------------------------------------------
# Request / domain errors
# ---------------------------------------------------------------------------

class ValidationFailed(HRLedgerError):
    """Malformed request or missing required fields."""

    status_code = 400


class AuthenticationError(HRLedgerError):
    """Missing, invalid, expired, or revoked session."""

    status_code = 401


class PermissionDenied(HRLedgerError):
    """Authenticated user lacks the required role."""

    status_code = 403


class NotFoundError(HRLedgerError):
    """Requested entity does not exist."""

    status_code = 404


class ConflictError(HRLedgerError):
    """Uniqueness constraint violated on a single write."""

    status_code = 409


class DuplicateRecord(ConflictError):
    """A store write collided with a unique field of an existing record."""

    def __init__(self, field: str, value: str) -> None:
        self.field = field
        self.value = value
        super().__init__(f"Duplicate value for {field}: {value!r}")


# ---------------------------------------------------------------------------
# Bulk import pipeline
# ---------------------------------------------------------------------------

class ImportFailure(HRLedgerError):
    """Error raised by the bulk employee import pipeline."""

    status_code = 400


class UploadRejected(ImportFailure):
    """Upload failed intake checks (content type or size)."""


class UnsupportedFormat(ImportFailure):
    """File extension has no decoder."""

    def __init__(self, filename: str) -> None:
        self.filename = filename
        super().__init__(f"Unsupported file type: {filename!r}. Only .xlsx and .csv files are allowed")


class InvalidWorksheet(ImportFailure):
    """Workbook has no usable first worksheet."""

    def __init__(self, message: str = "The uploaded file does not contain a valid worksheet") -> None:
        super().__init__(message)


class ParseFailure(ImportFailure):
    """File could not be decoded into rows."""

    def __init__(self, message: str, line: int | None = None) -> None:
        self.line = line
        if line is not None:
            message = f"{message} (line {line})"
        super().__init__(f"File parsing failed: {message}")


class MissingReferences(ImportFailure):
    """One or more referenced user accounts are not in the registry."""

    status_code = 404

    def __init__(self, missing_ids: list[str]) -> None:
        self.missing_ids = list(missing_ids)
        super().__init__(
            f"One or more user accounts not found. Missing IDs: {', '.join(self.missing_ids)}"
        )

    def payload(self) -> dict[str, Any]:
        return {"missingIds": self.missing_ids}


class CommitFailure(ImportFailure):
    """Bulk insert finished with per-item failures."""

    def __init__(self, message: str, result: ImportResult) -> None:
        self.result = result
        super().__init__(message)

    def payload(self) -> dict[str, Any]:
        return {
            "employees": [r.to_wire() for r in self.result.inserted],
            "failures": [
                f.model_dump(by_alias=True, mode="json", exclude_none=True)
                for f in self.result.failures
            ],
        }


class DuplicateKey(CommitFailure):
    """employeeId, workEmail or workPhoneNumber collided with an existing record."""

    status_code = 409


class InvalidRecords(CommitFailure):
    """Rows failed schema validation (missing fields, bad enum, invalid date)."""

    status_code = 400


class InternalCommitFailure(CommitFailure):
    """Unexpected store fault during the bulk insert."""

    status_code = 500


# ---------------------------------------------------------------------------
# Infrastructure
# ---------------------------------------------------------------------------

class StoreError(HRLedgerError):
    """Persistence backend operation failed."""


class CacheError(HRLedgerError):
    """Redis cache operation failed."""
