"""Deliberation message repository."""

from __future__ import annotations

from typing import List

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.models import DeliberationMessage
from .base import BaseRepository


class DeliberationMessageRepository(BaseRepository[DeliberationMessage]):
    """Repository for DeliberationMessage operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(DeliberationMessage, session)

    async def list_for_session(self, session_id: str) -> List[DeliberationMessage]:
        """Get a session's full transcript in stored order.

        Args:
            session_id: The research session ID

        Returns:
            Messages ordered by creation time, then insertion order
        """
        statement = (
            select(DeliberationMessage)
            .where(DeliberationMessage.session_id == session_id)
            .order_by(DeliberationMessage.created_at.asc(), DeliberationMessage.id.asc())
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def delete_for_session(self, session_id: str) -> None:
        """Delete every message of a session without committing."""
        await self.session.execute(
            delete(DeliberationMessage).where(DeliberationMessage.session_id == session_id)
        )
