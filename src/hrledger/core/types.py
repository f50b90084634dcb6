"""Type aliases used across hrledger."""

from __future__ import annotations

# Dotted camelCase path into an employee record, e.g. "employmentInfo.hireDate".
FieldPath = str
