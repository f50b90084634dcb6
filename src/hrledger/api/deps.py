"""FastAPI dependencies: services from app state, session user, role checks."""

from __future__ import annotations

from typing import Callable

from fastapi import Depends, Request

from hrledger.auth.tokens import SessionTokens
from hrledger.core.config import AppSettings
from hrledger.core.exceptions import AuthenticationError, PermissionDenied
from hrledger.importing.service import EmployeeImportService
from hrledger.models.user import Role, UserAccount
from hrledger.services import EmployeeService, UserService


def get_settings(request: Request) -> AppSettings:
    return request.app.state.settings


def get_tokens(request: Request) -> SessionTokens:
    return request.app.state.tokens


def get_user_service(request: Request) -> UserService:
    return request.app.state.user_service


def get_employee_service(request: Request) -> EmployeeService:
    return request.app.state.employee_service


def get_import_service(request: Request) -> EmployeeImportService:
    return request.app.state.import_service


def current_user(
    request: Request,
    settings: AppSettings = Depends(get_settings),
    tokens: SessionTokens = Depends(get_tokens),
    users: UserService = Depends(get_user_service),
) -> UserAccount:
    """The logged-in user from the session cookie."""
    claims = tokens.decode(request.cookies.get(settings.auth.cookie_name))
    user = users.get_optional(claims.user_id)
    if user is None:
        raise AuthenticationError("User not found, please login again")
    return user


def require_roles(*roles: Role) -> Callable[..., UserAccount]:
    """Dependency factory: the current user must hold one of ``roles``."""

    def dependency(user: UserAccount = Depends(current_user)) -> UserAccount:
        if user.role not in roles:
            raise PermissionDenied("You do not have permission to view this route")
        return user

    return dependency
