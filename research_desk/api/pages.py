"""Server-rendered dashboard pages."""

from __future__ import annotations

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, status
from fastapi.responses import HTMLResponse

from ..cache import PageCache, get_page_cache, research_page_path
from ..dependencies import get_research_service
from ..security import AuthUser, get_optional_user
from ..services.research import ResearchService
from ..views import render_not_found, render_research_page

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/dashboard", tags=["pages"])


def not_found_page() -> HTMLResponse:
    return HTMLResponse(render_not_found(), status_code=status.HTTP_404_NOT_FOUND)


@router.get("/research/{session_id}", response_class=HTMLResponse)
async def research_session_page(
    session_id: str,
    user: Optional[AuthUser] = Depends(get_optional_user),
    service: ResearchService = Depends(get_research_service),
    page_cache: PageCache = Depends(get_page_cache),
) -> HTMLResponse:
    """Render a session and its deliberation for its owner.

    Anonymous callers, unknown sessions and sessions owned by someone else
    all get the same not-found page.
    """
    if user is None:
        return not_found_page()

    research_session = await service.get_session_for_owner(session_id, user.id)
    if research_session is None:
        return not_found_page()

    path = research_page_path(session_id)
    cached = await page_cache.get(path)
    if cached is not None:
        return HTMLResponse(cached)

    messages = await service.list_messages(session_id)
    trades = await service.list_trades(session_id)
    html = render_research_page(research_session, messages, trades)
    await page_cache.set(path, html)
    logger.debug("research_page_rendered", session_id=session_id, messages=len(messages))
    return HTMLResponse(html)
