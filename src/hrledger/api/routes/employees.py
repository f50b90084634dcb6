"""Employee record endpoints, including bulk file import."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, File, UploadFile, status

from hrledger.api.deps import current_user, get_employee_service, get_import_service, require_roles
from hrledger.importing.service import EmployeeImportService
from hrledger.models.user import Role, UserAccount
from hrledger.services import EmployeeService

router = APIRouter(tags=["employees"])

admin_only = require_roles(Role.ADMIN)


@router.get("/")
def get_own_employee(
    user: UserAccount = Depends(current_user),
    employees: EmployeeService = Depends(get_employee_service),
) -> dict:
    record = employees.get_for_user(user.id)
    return {"success": True, "message": "Employee details", "employee": record.to_wire()}


@router.get("/all")
def list_employees(
    _admin: UserAccount = Depends(admin_only),
    employees: EmployeeService = Depends(get_employee_service),
) -> dict:
    records = employees.list_all()
    return {
        "success": True,
        "message": f"{len(records)} employees found",
        "employees": [r.to_wire() for r in records],
    }


@router.post("/create", status_code=status.HTTP_201_CREATED)
def create_employee(
    body: Annotated[dict[str, Any], Body()],
    _admin: UserAccount = Depends(admin_only),
    employees: EmployeeService = Depends(get_employee_service),
) -> dict:
    record = employees.create(body)
    return {"success": True, "message": "Employee created successfully", "employee": record.to_wire()}


@router.post("/create/bulk", status_code=status.HTTP_201_CREATED)
async def create_employees_bulk(
    file: Annotated[UploadFile, File(description=".xlsx or .csv employee sheet")],
    _admin: UserAccount = Depends(admin_only),
    importer: EmployeeImportService = Depends(get_import_service),
) -> dict:
    filename = file.filename or ""
    if file.size is not None:
        importer.check_upload(filename, file.content_type, file.size)
    data = await file.read()
    result = await importer.import_upload(filename, file.content_type, data)
    return {
        "success": True,
        "message": f"{len(result.inserted)} employees created successfully",
        "employees": [r.to_wire() for r in result.inserted],
        "unverifiedUserIds": result.unverified_user_ids,
    }


@router.get("/{employee_id}")
def get_employee(
    employee_id: str,
    _admin: UserAccount = Depends(admin_only),
    employees: EmployeeService = Depends(get_employee_service),
) -> dict:
    record = employees.get(employee_id)
    return {"success": True, "message": "Employee details", "employee": record.to_wire()}


@router.delete("/{employee_id}")
def delete_employee(
    employee_id: str,
    _admin: UserAccount = Depends(admin_only),
    employees: EmployeeService = Depends(get_employee_service),
) -> dict:
    employees.delete(employee_id)
    return {"success": True, "message": f"Employee {employee_id} deleted successfully"}
