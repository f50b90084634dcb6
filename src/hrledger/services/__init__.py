"""Application services: user accounts and employee records."""

from hrledger.services.employees import EmployeeService
from hrledger.services.users import UserService

__all__ = ["EmployeeService", "UserService"]
