"""EmployeeImportService runs the bulk employee import pipeline end to end.

upload intake -> staged file -> decode -> normalize -> reference check ->
bulk commit -> failure translation. The staged file is removed on every exit
path.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from hrledger.core.config import AppSettings
from hrledger.core.exceptions import HRLedgerError, InternalCommitFailure, UploadRejected
from hrledger.core.protocols import IEmployeeStore, IUserRegistry
from hrledger.importing.commit import BulkCommitCoordinator, raise_for_failures
from hrledger.importing.decoders import decode_file, decoder_for
from hrledger.importing.normalizer import RecordNormalizer
from hrledger.importing.references import ReferenceValidator
from hrledger.importing.staging import staged_upload
from hrledger.models.imports import ImportResult

logger = logging.getLogger(__name__)


class EmployeeImportService:
    """Bulk employee import from .xlsx / .csv uploads."""

    def __init__(
        self,
        *,
        employees: IEmployeeStore,
        users: IUserRegistry,
        settings: AppSettings,
    ) -> None:
        self._settings = settings
        self._normalizer = RecordNormalizer(settings.import_defaults)
        self._references = ReferenceValidator(users)
        self._coordinator = BulkCommitCoordinator(employees, users)

    @property
    def coordinator(self) -> BulkCommitCoordinator:
        return self._coordinator

    def check_upload(self, filename: str, content_type: str | None, size: int) -> None:
        """Intake checks applied before anything touches the disk."""
        upload = self._settings.upload
        if not filename:
            raise UploadRejected("No file provided")
        if content_type not in upload.allowed_content_types:
            raise UploadRejected("Only .xlsx and .csv files are allowed!")
        if size > upload.max_upload_bytes:
            raise UploadRejected(f"File too large. Maximum size: {upload.max_upload_mb}MB")

    async def import_upload(
        self, filename: str, content_type: str | None, data: bytes
    ) -> ImportResult:
        self.check_upload(filename, content_type, len(data))
        # Reject unknown extensions before staging anything.
        decoder_for(filename)
        with staged_upload(self._settings.upload.upload_dir, filename, data) as path:
            return await self.import_file(path, filename)

    async def import_file(self, path: str | Path, filename: str) -> ImportResult:
        """Run the pipeline over a staged file. The caller owns the file."""
        try:
            rows = await asyncio.to_thread(decode_file, path, filename)
            drafts = self._normalizer.normalize(rows)
            await self._references.validate(drafts)
            result = await self._coordinator.commit(drafts)
        except HRLedgerError:
            raise
        except Exception as exc:
            logger.exception("Import of %s failed unexpectedly", filename)
            raise InternalCommitFailure(f"File processing failed: {exc}", ImportResult()) from exc
        return raise_for_failures(result)
