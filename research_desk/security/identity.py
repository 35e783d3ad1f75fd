"""Identity-provider client.

Users and their credentials live with an external identity provider. This
module only verifies the signed access tokens it issues and turns them into
an :class:`AuthUser`.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import structlog
from jose import JWTError, jwt
from starlette.requests import HTTPConnection

from ..config import Settings, get_settings
from ..core.errors import AuthenticationError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class AuthUser:
    """Principal resolved from an access token."""

    id: str
    email: Optional[str] = None
    role: Optional[str] = None


class IdentityClient:
    """Verifies identity-provider access tokens."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        audience: Optional[str] = None,
        cookie_name: str = "access_token",
        token_expire_minutes: int = 60,
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.audience = audience
        self.cookie_name = cookie_name
        self.token_expire_minutes = token_expire_minutes

    @classmethod
    def from_settings(cls, settings: Settings) -> "IdentityClient":
        return cls(
            secret_key=settings.auth_jwt_secret,
            algorithm=settings.auth_jwt_algorithm,
            audience=settings.auth_jwt_audience,
            cookie_name=settings.auth_cookie_name,
            token_expire_minutes=settings.auth_token_expire_minutes,
        )

    def issue_token(
        self,
        user_id: str,
        *,
        email: Optional[str] = None,
        expires_delta: Optional[timedelta] = None,
    ) -> str:
        """Sign an access token the way the identity provider does.

        Args:
            user_id: Subject of the token
            email: Optional email claim
            expires_delta: Optional lifetime, defaults to the configured one

        Returns:
            Encoded JWT
        """
        expire = datetime.now(timezone.utc) + (
            expires_delta or timedelta(minutes=self.token_expire_minutes)
        )
        claims: dict[str, Any] = {"sub": user_id, "exp": expire, "type": "access"}
        if email:
            claims["email"] = email
        if self.audience:
            claims["aud"] = self.audience
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def verify_credentials(self, token: str) -> AuthUser:
        """Verify a token and return its principal.

        Raises:
            AuthenticationError: If the token is invalid, expired or has no subject
        """
        options = {"verify_aud": self.audience is not None}
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                audience=self.audience,
                options=options,
            )
        except JWTError as exc:
            logger.debug("token_rejected", error=str(exc))
            raise AuthenticationError() from exc

        if payload.get("type", "access") != "access":
            raise AuthenticationError()

        subject = payload.get("sub")
        if not subject:
            raise AuthenticationError()

        return AuthUser(id=str(subject), email=payload.get("email"), role=payload.get("role"))

    def get_user(self, token: Optional[str]) -> Optional[AuthUser]:
        """Resolve a token to a user, or None when it cannot be verified."""
        if not token:
            return None
        try:
            return self.verify_credentials(token)
        except AuthenticationError:
            return None

    def extract_token(self, conn: HTTPConnection) -> Optional[str]:
        """Read the bearer token from the Authorization header or the session cookie."""
        authorization = conn.headers.get("Authorization")
        if authorization:
            scheme, _, credentials = authorization.partition(" ")
            if scheme.lower() == "bearer" and credentials:
                return credentials.strip()
        return conn.cookies.get(self.cookie_name)

    def get_current_user(self, conn: HTTPConnection) -> Optional[AuthUser]:
        """Get the current user for this request, if any."""
        return self.get_user(self.extract_token(conn))


_identity_client: Optional[IdentityClient] = None


def get_identity_client() -> IdentityClient:
    """Get the global identity client (singleton)."""
    global _identity_client
    if _identity_client is None:
        _identity_client = IdentityClient.from_settings(get_settings())
    return _identity_client
