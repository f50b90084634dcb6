"""Session tokens carried in an HTTP-only cookie.

Tokens are HS256 JWTs holding the user id and role. Logging out records the
token id in the cache until the token would have expired anyway.
"""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass

import jwt

from hrledger.core.config import AuthConfig
from hrledger.core.exceptions import AuthenticationError
from hrledger.core.protocols import ICacheBackend
from hrledger.models.user import Role, UserAccount

logger = logging.getLogger(__name__)

REVOKED_PREFIX = "session:revoked:"


@dataclass(frozen=True)
class TokenClaims:
    user_id: str
    role: Role
    token_id: str
    expires_at: int


class SessionTokens:
    """Issues, decodes and revokes session tokens."""

    def __init__(self, config: AuthConfig, cache: ICacheBackend) -> None:
        self._config = config
        self._cache = cache

    def issue(self, user: UserAccount) -> str:
        now = int(time.time())
        payload = {
            "id": user.id,
            "role": str(user.role),
            "jti": uuid.uuid4().hex,
            "iat": now,
            "exp": now + self._config.token_ttl_seconds,
        }
        return jwt.encode(payload, self._config.jwt_secret, algorithm=self._config.jwt_algorithm)

    def decode(self, token: str | None) -> TokenClaims:
        """Validate ``token`` and return its claims.

        Raises:
            AuthenticationError: missing, malformed, expired, or revoked token.
        """
        if not token:
            raise AuthenticationError("Token not received - Unauthorized, please login to continue")
        try:
            decoded = jwt.decode(
                token,
                self._config.jwt_secret,
                algorithms=[self._config.jwt_algorithm],
                options={"require": ["exp", "jti"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise AuthenticationError("Token has expired, please login again") from exc
        except jwt.InvalidTokenError as exc:
            raise AuthenticationError(f"Invalid token - Unauthorized: {exc}") from exc

        if "id" not in decoded:
            raise AuthenticationError("Invalid token payload - Unauthorized, please login again")
        if self._cache.exists(f"{REVOKED_PREFIX}{decoded['jti']}"):
            raise AuthenticationError("Session has been logged out, please login again")

        try:
            role = Role(decoded.get("role", Role.USER))
        except ValueError as exc:
            raise AuthenticationError("Invalid token payload - Unauthorized, please login again") from exc
        return TokenClaims(
            user_id=decoded["id"],
            role=role,
            token_id=decoded["jti"],
            expires_at=int(decoded["exp"]),
        )

    def revoke(self, token: str | None) -> None:
        """Blocklist ``token`` until it expires. Invalid tokens are ignored."""
        try:
            claims = self.decode(token)
        except AuthenticationError:
            return
        ttl = claims.expires_at - int(time.time())
        if ttl > 0:
            self._cache.setex(f"{REVOKED_PREFIX}{claims.token_id}", ttl, claims.user_id)
            logger.info("Revoked session %s for user %s", claims.token_id, claims.user_id)
