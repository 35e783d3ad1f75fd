"""Custom exception hierarchy for the research desk backend."""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import status


class ResearchDeskError(Exception):
    """Base class for application-specific exceptions."""

    default_message = "An unexpected error occurred."
    code = "research_desk_error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.code = (code or self.code).lower().replace(" ", "_")
        self.status_code = status_code or self.status_code
        self.details = details or {}


class AuthenticationError(ResearchDeskError):
    """Raised when the caller cannot be resolved to a user."""

    default_message = "Unauthorized"
    code = "authentication_error"
    status_code = status.HTTP_401_UNAUTHORIZED


class AuthorizationError(ResearchDeskError):
    """Raised when the caller does not own the requested resource."""

    default_message = "Unauthorized"
    code = "authorization_error"
    status_code = status.HTTP_403_FORBIDDEN


class ValidationError(ResearchDeskError):
    """Raised when user input fails validation rules."""

    default_message = "Request validation failed."
    code = "validation_error"
    status_code = status.HTTP_400_BAD_REQUEST


class ResourceNotFoundError(ResearchDeskError):
    """Raised when a requested resource cannot be found."""

    default_message = "Requested resource was not found."
    code = "resource_not_found"
    status_code = status.HTTP_404_NOT_FOUND


class PersistenceError(ResearchDeskError):
    """Raised when a database write does not go through."""

    default_message = "Database operation failed."
    code = "persistence_error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class ExternalServiceError(ResearchDeskError):
    """Raised when an upstream service fails."""

    default_message = "Upstream service is unavailable."
    code = "external_service_error"
    status_code = status.HTTP_502_BAD_GATEWAY


__all__ = [
    "AuthenticationError",
    "AuthorizationError",
    "ExternalServiceError",
    "PersistenceError",
    "ResearchDeskError",
    "ResourceNotFoundError",
    "ValidationError",
]
