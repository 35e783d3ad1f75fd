"""Security package."""

from __future__ import annotations

from .dependencies import get_optional_user
from .identity import AuthUser, IdentityClient, get_identity_client

__all__ = [
    "AuthUser",
    "IdentityClient",
    "get_identity_client",
    "get_optional_user",
]
