"""User account endpoints: sign-up, login, logout, profile."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response, status

from hrledger.api.deps import current_user, get_settings, get_tokens, get_user_service
from hrledger.auth.tokens import SessionTokens
from hrledger.core.config import AppSettings
from hrledger.models.user import LoginRequest, SignupRequest, UserAccount, UserUpdateRequest
from hrledger.services import UserService

router = APIRouter(tags=["users"])


def _set_session_cookie(response: Response, token: str, settings: AppSettings) -> None:
    response.set_cookie(
        settings.auth.cookie_name,
        token,
        max_age=settings.auth.cookie_max_age_seconds,
        httponly=True,
        secure=settings.secure_cookies,
    )


@router.post("/signup", status_code=status.HTTP_201_CREATED)
def signup(
    body: SignupRequest,
    response: Response,
    users: UserService = Depends(get_user_service),
    tokens: SessionTokens = Depends(get_tokens),
    settings: AppSettings = Depends(get_settings),
) -> dict:
    user = users.register(body)
    _set_session_cookie(response, tokens.issue(user), settings)
    return {"success": True, "message": "User created successfully", "user": user.to_wire()}


@router.post("/login")
def login(
    body: LoginRequest,
    response: Response,
    users: UserService = Depends(get_user_service),
    tokens: SessionTokens = Depends(get_tokens),
    settings: AppSettings = Depends(get_settings),
) -> dict:
    user = users.login(body)
    _set_session_cookie(response, tokens.issue(user), settings)
    return {"success": True, "message": "User logged in successfully", "user": user.to_wire()}


@router.post("/logout")
def logout(
    request: Request,
    response: Response,
    tokens: SessionTokens = Depends(get_tokens),
    settings: AppSettings = Depends(get_settings),
) -> dict:
    tokens.revoke(request.cookies.get(settings.auth.cookie_name))
    response.delete_cookie(settings.auth.cookie_name, httponly=True, secure=settings.secure_cookies)
    return {"success": True, "message": "User logged out successfully"}


@router.get("/me")
def me(user: UserAccount = Depends(current_user)) -> dict:
    return {"success": True, "message": "User details", "user": user.to_wire()}


@router.put("/update")
def update(
    body: UserUpdateRequest,
    user: UserAccount = Depends(current_user),
    users: UserService = Depends(get_user_service),
) -> dict:
    updated = users.update(user.id, body)
    return {
        "success": True,
        "message": "User details updated successfully",
        "user": updated.to_wire(),
    }
