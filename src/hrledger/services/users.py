"""User account service: sign-up, login and profile updates."""

from __future__ import annotations

import logging

from hrledger.auth.passwords import hash_password, verify_password
from hrledger.core.exceptions import AuthenticationError, NotFoundError
from hrledger.core.protocols import IUserRegistry
from hrledger.models.user import LoginRequest, SignupRequest, UserAccount, UserUpdateRequest

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, users: IUserRegistry) -> None:
        self._users = users

    def register(self, request: SignupRequest) -> UserAccount:
        user = UserAccount(
            username=request.username,
            email=request.email,
            password_hash=hash_password(request.password),
        )
        created = self._users.create(user)
        logger.info("Registered user %s", created.id)
        return created

    def login(self, request: LoginRequest) -> UserAccount:
        """Check credentials. Accounts stay locked until an admin verifies them."""
        user = self._users.find_by_email(request.email)
        if user is None or not verify_password(user.password_hash, request.password):
            raise AuthenticationError("Email or Password do not match or user does not exist")
        if not user.is_verified:
            raise AuthenticationError("You are not verified for the login")
        return user

    def get_optional(self, user_id: str) -> UserAccount | None:
        return self._users.get(user_id)

    def get(self, user_id: str) -> UserAccount:
        user = self._users.get(user_id)
        if user is None:
            raise NotFoundError("Invalid user id or user does not exist")
        return user

    def update(self, user_id: str, request: UserUpdateRequest) -> UserAccount:
        user = self.get(user_id)
        changes = request.model_dump(exclude_none=True)
        if not changes:
            return user
        return self._users.update(user.model_copy(update=changes))
