"""Header mapper: spreadsheet column titles to employee record field paths.

Matching is exact and case-sensitive. Headers not in the table are ignored so
files may carry extra informational columns.
"""

from __future__ import annotations

from hrledger.core.types import FieldPath

HEADER_FIELD_PATHS: dict[str, FieldPath] = {
    # --- Identity / personal ---
    "Full Name": "fullName",
    "Employee ID": "employeeId",
    "Date of Birth": "dateOfBirth",
    "Gender": "gender",
    "Nationality": "nationality",
    "Photo URL": "photoUrl",
    "User Account ID": "userAccount",
    # --- Employment ---
    "Job Title": "employmentInfo.jobTitle",
    "Manager ID": "employmentInfo.manager",
    "Department": "employmentInfo.department",
    "Hire Date": "employmentInfo.hireDate",
    "Employment Type": "employmentInfo.employmentType",
    "Status": "employmentInfo.status",
    "Termination Date": "employmentInfo.terminationDate",
    # --- Contact ---
    "Home Address": "contactInfo.homeAddress",
    "Personal Phone Number": "contactInfo.personalPhoneNumber",
    "Work Phone Number": "contactInfo.workPhoneNumber",
    "Personal Email": "contactInfo.personalEmail",
    "Work Email": "contactInfo.workEmail",
}

DATE_FIELD_PATHS: frozenset[FieldPath] = frozenset({
    "dateOfBirth",
    "employmentInfo.hireDate",
    "employmentInfo.terminationDate",
})

NESTED_GROUPS: tuple[str, ...] = ("employmentInfo", "contactInfo")


def map_header(header: str) -> FieldPath | None:
    """Return the field path for ``header``, or None when it is not recognized."""
    return HEADER_FIELD_PATHS.get(header)


def map_headers(headers: list[str]) -> dict[str, FieldPath]:
    """Recognized subset of ``headers`` with their field paths."""
    return {h: HEADER_FIELD_PATHS[h] for h in headers if h in HEADER_FIELD_PATHS}


def split_path(path: FieldPath) -> tuple[str | None, str]:
    """``"employmentInfo.hireDate"`` -> ``("employmentInfo", "hireDate")``."""
    group, _, leaf = path.rpartition(".")
    return (group or None), leaf
