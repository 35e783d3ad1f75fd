"""Deliberation message model."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from .common import utcnow


class DeliberationMessage(SQLModel, table=True):
    """One turn of the deliberation transcript attached to a session.

    The autoincrement ``id`` records insertion order and breaks ties between
    messages written within the same timestamp.
    """

    __tablename__ = "deliberation_messages"

    id: Optional[int] = Field(default=None, primary_key=True)
    session_id: str = Field(foreign_key="research_sessions.id", index=True, max_length=36)

    role: str = Field(max_length=20)  # user, assistant, gemini, chatgpt, claude
    agent_name: Optional[str] = Field(default=None, max_length=64)
    content: str

    created_at: datetime = Field(
        default_factory=utcnow, index=True, sa_type=DateTime(timezone=True)
    )
