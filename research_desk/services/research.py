"""Service layer for research sessions and their deliberation transcripts."""

from __future__ import annotations

from typing import List, Optional

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..cache import PageCache, research_page_path
from ..core.errors import PersistenceError, ResourceNotFoundError, ValidationError
from ..db.models import (
    DeliberationMessage,
    MessageRole,
    ResearchSession,
    ResearchStrategy,
    SessionStatus,
    SimulatedTrade,
    utcnow,
)
from ..repositories import (
    DeliberationMessageRepository,
    ResearchSessionRepository,
    SimulatedTradeRepository,
)

logger = structlog.get_logger(__name__)

TITLE_PREFIX_LENGTH = 100
TITLE_ELLIPSIS = "..."

STRATEGY_CHOICES = ", ".join(strategy.value for strategy in ResearchStrategy)


def derive_title(title: Optional[str], thesis: str) -> str:
    """Use the given title, or the first 100 characters of the thesis plus an ellipsis."""
    if title:
        return title
    return f"{thesis[:TITLE_PREFIX_LENGTH]}{TITLE_ELLIPSIS}"


def parse_strategy(strategy: Optional[str]) -> ResearchStrategy:
    """Resolve a strategy name.

    Raises:
        ValidationError: Unknown strategy name, including null and empty
    """
    try:
        return ResearchStrategy(strategy)
    except ValueError as exc:
        raise ValidationError(
            f"Invalid strategy. Must be one of: {STRATEGY_CHOICES}",
            details={"strategy": strategy},
        ) from exc


class ResearchService:
    """Creates, reads and deletes research sessions on behalf of their owner."""

    def __init__(self, session: AsyncSession, page_cache: Optional[PageCache] = None):
        self.session = session
        self.sessions = ResearchSessionRepository(session)
        self.messages = DeliberationMessageRepository(session)
        self.trades = SimulatedTradeRepository(session)
        self.page_cache = page_cache

    async def create_session(
        self,
        *,
        user_id: str,
        thesis: Optional[str],
        title: Optional[str] = None,
        strategy: Optional[str] = ResearchStrategy.GENERAL.value,
    ) -> ResearchSession:
        """Create a research session owned by ``user_id``.

        Args:
            user_id: Owner of the new session
            thesis: Investment thesis, required and non-empty
            title: Optional title; derived from the thesis when absent
            strategy: Strategy name, ``general`` when the caller gave none

        Returns:
            The persisted session

        Raises:
            ValidationError: Missing thesis or unknown strategy
            PersistenceError: The insert did not commit
        """
        if not thesis:
            raise ValidationError("Thesis is required")
        resolved_strategy = parse_strategy(strategy)

        now = utcnow()
        research_session = ResearchSession(
            user_id=user_id,
            title=derive_title(title, thesis),
            thesis=thesis,
            strategy=resolved_strategy.value,
            status=SessionStatus.RESEARCHING.value,
            research_started_at=now,
            created_at=now,
            updated_at=now,
        )
        try:
            research_session = await self.sessions.create(research_session)
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.error("research_session_insert_failed", user_id=user_id, error=str(exc))
            raise PersistenceError("Failed to create research session") from exc
        logger.info(
            "research_session_created",
            session_id=research_session.id,
            user_id=user_id,
            strategy=research_session.strategy,
        )
        return research_session

    async def get_session_for_owner(
        self, session_id: str, user_id: str
    ) -> Optional[ResearchSession]:
        """The session when it exists and belongs to ``user_id``, None otherwise."""
        return await self.sessions.get_for_user(session_id, user_id)

    async def list_sessions(self, user_id: str) -> List[ResearchSession]:
        return await self.sessions.list_for_user(user_id)

    async def list_messages(self, session_id: str) -> List[DeliberationMessage]:
        return await self.messages.list_for_session(session_id)

    async def add_message(
        self,
        *,
        session_id: str,
        role: str,
        content: str,
        agent_name: Optional[str] = None,
    ) -> DeliberationMessage:
        """Append a message to a session's transcript.

        Raises:
            ValidationError: Unknown role
            ResourceNotFoundError: The session does not exist
            PersistenceError: The insert did not commit
        """
        try:
            MessageRole(role)
        except ValueError as exc:
            raise ValidationError(f"Invalid role: {role}", details={"role": role}) from exc

        if await self.sessions.get(session_id) is None:
            raise ResourceNotFoundError("Session not found", details={"session_id": session_id})

        try:
            message = await self.messages.create(
                DeliberationMessage(
                    session_id=session_id,
                    role=role,
                    content=content,
                    agent_name=agent_name,
                )
            )
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.error("deliberation_message_insert_failed", session_id=session_id, error=str(exc))
            raise PersistenceError("Failed to save message") from exc
        if self.page_cache is not None:
            await self.page_cache.invalidate(research_page_path(session_id))
        return message

    async def delete_session(self, *, session_id: Optional[str], user_id: str) -> None:
        """Delete a session together with its messages and trades.

        Raises:
            ValidationError: Missing session ID
            ResourceNotFoundError: Session missing or owned by someone else
            PersistenceError: The delete did not commit
        """
        if not session_id:
            raise ValidationError("Session ID is required")

        research_session = await self.sessions.get_for_user(session_id, user_id)
        if research_session is None:
            raise ResourceNotFoundError("Session not found")

        try:
            await self.messages.delete_for_session(session_id)
            await self.trades.delete_for_session(session_id)
            await self.sessions.delete(research_session)
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.error("research_session_delete_failed", session_id=session_id, error=str(exc))
            raise PersistenceError("Failed to delete session") from exc

        if self.page_cache is not None:
            await self.page_cache.invalidate(research_page_path(session_id))
        logger.info("research_session_deleted", session_id=session_id, user_id=user_id)

    async def list_trades(self, session_id: str) -> List[SimulatedTrade]:
        """A session's trades, newest first, as stored."""
        return await self.trades.list_by_session(session_id)
