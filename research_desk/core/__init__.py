"""Core utilities shared across the research desk backend."""

from __future__ import annotations

from .errors import (
    AuthenticationError,
    AuthorizationError,
    ExternalServiceError,
    PersistenceError,
    ResearchDeskError,
    ResourceNotFoundError,
    ValidationError,
)

__all__ = [
    "AuthenticationError",
    "AuthorizationError",
    "ExternalServiceError",
    "PersistenceError",
    "ResearchDeskError",
    "ResourceNotFoundError",
    "ValidationError",
]
