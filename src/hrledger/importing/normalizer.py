"""Record normalizer: mapped FlatRows into nested employee drafts.

A draft is the wire-shaped dict an ``EmployeeRecord`` is validated from. The
normalizer does not validate: an unparseable date is carried as an
``InvalidDate`` marker and rejected when the commit step validates the draft.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Iterable

from openpyxl.utils.datetime import from_excel

from hrledger.core.config import ImportDefaults
from hrledger.core.types import FieldPath
from hrledger.importing.cells import Cell, CellKind, FlatRow
from hrledger.importing.header_map import DATE_FIELD_PATHS, NESTED_GROUPS, map_header, split_path

logger = logging.getLogger(__name__)

DATE_FORMATS = (
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%d.%m.%Y",
    "%d-%m-%Y",
    "%B %d, %Y",
    "%d %B %Y",
)


@dataclass(frozen=True)
class InvalidDate:
    """A date cell that could not be parsed; fails date validation downstream."""

    raw: str

    def __str__(self) -> str:
        return f"Invalid Date ({self.raw!r})"


@dataclass
class EmployeeDraft:
    """One normalized row. ``row_number`` is the 1-based data row position."""

    row_number: int
    fields: dict[str, Any] = field(default_factory=dict)

    @property
    def employee_id(self) -> str | None:
        return self.fields.get("employeeId")

    @property
    def user_account(self) -> str | None:
        return self.fields.get("userAccount")


def parse_date(cell: Cell) -> date | InvalidDate:
    """Calendar date from a DATE, NUMBER (Excel serial) or TEXT cell."""
    if cell.kind == CellKind.DATE:
        return cell.value  # type: ignore[return-value]

    if cell.kind == CellKind.NUMBER:
        try:
            converted = from_excel(cell.value)
        except (OverflowError, ValueError, TypeError):
            converted = None
        if isinstance(converted, datetime):
            return converted.date()
        return InvalidDate(cell.as_text())

    text = cell.as_text()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return InvalidDate(text)


class RecordNormalizer:
    """Builds employee drafts from decoded rows, filling configured defaults."""

    def __init__(self, defaults: ImportDefaults | None = None) -> None:
        self._defaults = defaults or ImportDefaults()

    def normalize(self, rows: Iterable[FlatRow]) -> list[EmployeeDraft]:
        drafts = [self.normalize_row(row, n) for n, row in enumerate(rows, start=1)]
        logger.debug("Normalized %d rows", len(drafts))
        return drafts

    def normalize_row(self, row: FlatRow, row_number: int) -> EmployeeDraft:
        fields: dict[str, Any] = {group: {} for group in NESTED_GROUPS}

        for header, cell in row.items():
            path = map_header(header)
            if path is None:
                continue
            value = self._coerce(path, cell)
            if value is None:
                continue
            group, leaf = split_path(path)
            target = fields[group] if group else fields
            target[leaf] = value

        employment = fields["employmentInfo"]
        employment.setdefault("employmentType", self._defaults.employment_type)
        employment.setdefault("status", self._defaults.status)
        return EmployeeDraft(row_number=row_number, fields=fields)

    @staticmethod
    def _coerce(path: FieldPath, cell: Cell) -> Any:
        """Typed value for ``path``, or None when the cell counts as empty."""
        if cell.is_absent:
            return None
        if cell.kind == CellKind.TEXT and not cell.as_text():
            return None
        if path in DATE_FIELD_PATHS:
            return parse_date(cell)
        return cell.as_text() or None
