"""FastAPI dependencies for resolving the caller."""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Request

from .identity import AuthUser, IdentityClient, get_identity_client


async def get_optional_user(
    request: Request,
    identity: IdentityClient = Depends(get_identity_client),
) -> Optional[AuthUser]:
    """Get the current user if a valid token accompanies the request.

    Routes check for None themselves so the 401 is rendered in each route's
    own response envelope.

    Args:
        request: Incoming request
        identity: Identity-provider client

    Returns:
        The caller, or None
    """
    return identity.get_current_user(request)
