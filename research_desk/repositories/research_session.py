"""Research session repository."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.models import ResearchSession
from .base import BaseRepository


class ResearchSessionRepository(BaseRepository[ResearchSession]):
    """Repository for ResearchSession operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(ResearchSession, session)

    async def get_for_user(self, session_id: str, user_id: str) -> Optional[ResearchSession]:
        """Get a session only when it belongs to ``user_id``.

        Args:
            session_id: The research session ID
            user_id: The caller's user ID

        Returns:
            The session, or None when missing or owned by someone else
        """
        statement = select(ResearchSession).where(
            ResearchSession.id == session_id,
            ResearchSession.user_id == user_id,
        )
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def list_for_user(
        self, user_id: str, *, skip: int = 0, limit: int = 100
    ) -> List[ResearchSession]:
        """List a user's sessions, newest first."""
        statement = (
            select(ResearchSession)
            .where(ResearchSession.user_id == user_id)
            .order_by(ResearchSession.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())
