"""Research session model."""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import uuid4

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from .common import ResearchStrategy, SessionStatus, utcnow


class ResearchSession(SQLModel, table=True):
    """A user's unit of research work built around an investment thesis."""

    __tablename__ = "research_sessions"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True, max_length=36)
    user_id: str = Field(index=True, max_length=255)

    title: str = Field(default="New Research")
    thesis: Optional[str] = Field(default=None)
    strategy: str = Field(default=ResearchStrategy.GENERAL.value, max_length=32)
    status: str = Field(default=SessionStatus.RESEARCHING.value, max_length=32, index=True)

    research_started_at: Optional[datetime] = Field(
        default=None, sa_type=DateTime(timezone=True)
    )
    created_at: datetime = Field(
        default_factory=utcnow, index=True, sa_type=DateTime(timezone=True)
    )
    updated_at: datetime = Field(
        default_factory=utcnow, sa_type=DateTime(timezone=True)
    )
