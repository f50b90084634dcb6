"""File decoders turn an uploaded .xlsx or .csv into ordered FlatRows.

The decoder is picked from the file extension. Both decoders keep input row
order and decode the whole file before anything downstream runs, so a bad
file never reaches the store.
"""

from __future__ import annotations

import csv
import logging
import zipfile
from pathlib import Path
from typing import Callable, Iterator, TextIO

import openpyxl
from openpyxl.utils.exceptions import InvalidFileException

from hrledger.core.exceptions import InvalidWorksheet, ParseFailure, UnsupportedFormat
from hrledger.importing.cells import Cell, FlatRow

logger = logging.getLogger(__name__)

Decoder = Callable[[Path], list[FlatRow]]


# ---------------------------------------------------------------------------
# Spreadsheet (.xlsx)
# ---------------------------------------------------------------------------

# Malformed workbook XML surfaces as xml.etree ParseError, or lxml's
# XMLSyntaxError when lxml is installed; both are SyntaxError subclasses.
_WORKBOOK_ERRORS = (InvalidFileException, zipfile.BadZipFile, KeyError, ValueError, SyntaxError)


def decode_spreadsheet(path: Path) -> list[FlatRow]:
    """Read the first worksheet; row 1 holds the headers."""
    try:
        workbook = openpyxl.load_workbook(path, read_only=True, data_only=True)
    except _WORKBOOK_ERRORS as exc:
        raise ParseFailure(f"invalid XLSX workbook: {exc}") from exc

    try:
        if not workbook.worksheets:
            raise InvalidWorksheet()
        return _read_first_sheet(workbook.worksheets[0])
    except _WORKBOOK_ERRORS as exc:
        # read-only sheets parse their XML lazily, during iteration
        raise ParseFailure(f"invalid XLSX worksheet: {exc}") from exc
    finally:
        workbook.close()


def _read_first_sheet(sheet) -> list[FlatRow]:
    rows = sheet.iter_rows(values_only=True)

    header_row = next(rows, None)
    if header_row is None or all(value is None for value in header_row):
        raise InvalidWorksheet("The first worksheet of the uploaded file is empty")
    headers = ["" if value is None else str(value) for value in header_row]

    decoded: list[FlatRow] = []
    for values in rows:
        if all(value is None for value in values):
            continue
        decoded.append({
            headers[idx]: Cell.of(value)
            for idx, value in enumerate(values)
            if idx < len(headers)
        })
    return decoded


# ---------------------------------------------------------------------------
# Delimited text (.csv)
# ---------------------------------------------------------------------------

def iter_delimited_rows(stream: TextIO) -> Iterator[FlatRow]:
    """Yield one FlatRow per record after the header line, in file order.

    Blank records are skipped. A record whose field count differs from the
    header aborts the decode.
    """
    reader = csv.reader(stream, strict=True)
    try:
        headers = next(reader, None)
        if headers is None:
            return
        for record in reader:
            if not any(field.strip() for field in record):
                continue
            if len(record) != len(headers):
                raise ParseFailure(
                    f"invalid record length: expected {len(headers)} fields, found {len(record)}",
                    line=reader.line_num,
                )
            yield {header: Cell.of(value) for header, value in zip(headers, record)}
    except csv.Error as exc:
        raise ParseFailure(str(exc), line=reader.line_num) from exc


def decode_delimited(path: Path) -> list[FlatRow]:
    """Fully buffer ``iter_delimited_rows`` over the file at ``path``."""
    try:
        with open(path, newline="", encoding="utf-8-sig") as stream:
            return list(iter_delimited_rows(stream))
    except UnicodeDecodeError as exc:
        raise ParseFailure(f"file is not valid UTF-8 text: {exc.reason}") from exc


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------

DECODERS: dict[str, Decoder] = {
    ".xlsx": decode_spreadsheet,
    ".csv": decode_delimited,
}


def decoder_for(filename: str) -> Decoder:
    """Pick a decoder by extension; raises UnsupportedFormat for anything else."""
    decoder = DECODERS.get(Path(filename).suffix.lower())
    if decoder is None:
        raise UnsupportedFormat(filename)
    return decoder


def decode_file(path: str | Path, filename: str) -> list[FlatRow]:
    """Decode the staged file at ``path`` using the extension of ``filename``."""
    decoder = decoder_for(filename)
    rows = decoder(Path(path))
    logger.info("Decoded %d rows from %s", len(rows), filename)
    return rows
