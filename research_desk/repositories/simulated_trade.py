"""Simulated trade repository."""

from __future__ import annotations

from typing import List, Optional, Tuple

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.models import ResearchSession, SimulatedTrade
from .base import BaseRepository


class SimulatedTradeRepository(BaseRepository[SimulatedTrade]):
    """Repository for SimulatedTrade operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(SimulatedTrade, session)

    async def get_with_owner(self, trade_id: str) -> Optional[Tuple[SimulatedTrade, str]]:
        """Fetch a trade joined with its parent session's owner.

        Args:
            trade_id: The trade ID

        Returns:
            ``(trade, owner_user_id)`` or None when the trade does not exist
        """
        statement = (
            select(SimulatedTrade, ResearchSession.user_id)
            .join(ResearchSession, ResearchSession.id == SimulatedTrade.session_id)
            .where(SimulatedTrade.id == trade_id)
        )
        result = await self.session.execute(statement)
        row = result.first()
        if row is None:
            return None
        return row[0], row[1]

    async def list_by_session(self, session_id: str) -> List[SimulatedTrade]:
        """Get all trades for a session, newest first."""
        statement = (
            select(SimulatedTrade)
            .where(SimulatedTrade.session_id == session_id)
            .order_by(SimulatedTrade.created_at.desc())
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def list_unconfirmed_cancellations(self, *, limit: int = 100) -> List[SimulatedTrade]:
        """Trades with a recorded cancel request the broker has not confirmed.

        Args:
            limit: Maximum number of records to return

        Returns:
            Trades oldest request first
        """
        statement = (
            select(SimulatedTrade)
            .where(
                SimulatedTrade.cancel_requested_at.is_not(None),
                SimulatedTrade.broker_cancel_confirmed.is_(False),
                SimulatedTrade.broker_order_id.is_not(None),
            )
            .order_by(SimulatedTrade.cancel_requested_at.asc())
            .limit(limit)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def delete_for_session(self, session_id: str) -> None:
        """Delete every trade of a session without committing."""
        await self.session.execute(
            delete(SimulatedTrade).where(SimulatedTrade.session_id == session_id)
        )
