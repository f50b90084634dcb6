"""Tagged scalar cell values produced by the file decoders.

Spreadsheets hand back numbers, dates and strings; CSV hands back strings
only. Every decoded value is wrapped in a ``Cell`` so the normalizer can coerce
by kind instead of guessing at runtime types.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum
from typing import Any, Union

CellValue = Union[str, int, float, date, None]


class CellKind(StrEnum):
    TEXT = "TEXT"
    NUMBER = "NUMBER"
    DATE = "DATE"
    ABSENT = "ABSENT"


@dataclass(frozen=True)
class Cell:
    kind: CellKind
    value: CellValue = None

    @classmethod
    def of(cls, raw: Any) -> Cell:
        """Wrap a raw decoder value. Unknown object types count as absent."""
        if raw is None:
            return ABSENT
        if isinstance(raw, bool):  # bool is an int subclass
            return cls(CellKind.TEXT, str(raw))
        if isinstance(raw, str):
            return cls(CellKind.TEXT, raw)
        if isinstance(raw, (int, float)):
            return cls(CellKind.NUMBER, raw)
        if isinstance(raw, datetime):
            return cls(CellKind.DATE, raw.date())
        if isinstance(raw, date):
            return cls(CellKind.DATE, raw)
        return ABSENT

    @property
    def is_absent(self) -> bool:
        return self.kind == CellKind.ABSENT

    def as_text(self) -> str:
        """Trimmed string form; integral numbers lose their ``.0``."""
        if self.kind == CellKind.ABSENT:
            return ""
        if self.kind == CellKind.NUMBER:
            value = self.value
            if isinstance(value, float) and value.is_integer():
                return str(int(value))
            return str(value)
        if self.kind == CellKind.DATE:
            return self.value.isoformat()  # type: ignore[union-attr]
        return str(self.value).strip()


ABSENT = Cell(CellKind.ABSENT)

FlatRow = dict[str, Cell]
