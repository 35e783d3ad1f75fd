"""Research session API endpoints."""

from __future__ import annotations

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ..core.errors import AuthenticationError, ResearchDeskError
from ..dependencies import get_research_service
from ..schemas.research import (
    CreateResearchRequest,
    CreateResearchResponse,
    DeleteResearchRequest,
    ResearchSessionResponse,
)
from ..security import AuthUser, get_optional_user
from ..services.research import ResearchService
from .common import read_json_body

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/research", tags=["research"])


def _error(exc: ResearchDeskError) -> JSONResponse:
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


@router.post("/create")
async def create_research_session(
    request: Request,
    user: Optional[AuthUser] = Depends(get_optional_user),
    service: ResearchService = Depends(get_research_service),
) -> JSONResponse:
    """Start a research session for the caller."""
    try:
        if user is None:
            raise AuthenticationError()

        payload = await read_json_body(request, CreateResearchRequest)
        options = {}
        # An explicit null strategy is rejected; only a missing key defaults
        if "strategy" in payload.model_fields_set:
            options["strategy"] = payload.strategy
        research_session = await service.create_session(
            user_id=user.id,
            thesis=payload.thesis,
            title=payload.title,
            **options,
        )
        body = CreateResearchResponse(
            session_id=research_session.id,
            strategy=research_session.strategy,
        )
        return JSONResponse(body.model_dump(by_alias=True))

    except ResearchDeskError as exc:
        return _error(exc)
    except Exception as e:
        logger.error("research_session_create_failed", error=str(e), error_type=type(e).__name__)
        return JSONResponse({"error": "Failed to create research session"}, status_code=500)


@router.get("")
async def list_research_sessions(
    user: Optional[AuthUser] = Depends(get_optional_user),
    service: ResearchService = Depends(get_research_service),
) -> JSONResponse:
    """List the caller's research sessions, newest first."""
    if user is None:
        return _error(AuthenticationError())

    sessions = await service.list_sessions(user.id)
    return JSONResponse(
        {
            "sessions": [
                ResearchSessionResponse.model_validate(s).model_dump(mode="json")
                for s in sessions
            ]
        }
    )


@router.delete("/delete")
async def delete_research_session(
    request: Request,
    user: Optional[AuthUser] = Depends(get_optional_user),
    service: ResearchService = Depends(get_research_service),
) -> JSONResponse:
    """Delete one of the caller's sessions with its messages and trades."""
    try:
        if user is None:
            raise AuthenticationError()

        payload = await read_json_body(request, DeleteResearchRequest)
        await service.delete_session(session_id=payload.session_id, user_id=user.id)
        return JSONResponse({"success": True})

    except ResearchDeskError as exc:
        return _error(exc)
    except Exception as e:
        logger.error("research_session_delete_failed", error=str(e), error_type=type(e).__name__)
        return JSONResponse({"error": "Failed to delete session"}, status_code=500)
