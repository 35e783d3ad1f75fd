"""Schemas for research session endpoints.

Request fields are optional so that presence checks happen in the handler
and produce the documented error messages.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CreateResearchRequest(BaseModel):
    """Request to start a research session."""

    title: Optional[str] = Field(None, description="Session title; derived from the thesis when empty")
    thesis: Optional[str] = Field(None, description="Investment thesis")
    strategy: Optional[str] = Field(None, description="value, special-sits, distressed or general")


class CreateResearchResponse(BaseModel):
    """Identifier of the created session."""

    session_id: str = Field(..., serialization_alias="sessionId")
    strategy: str


class DeleteResearchRequest(BaseModel):
    """Request to delete a research session."""

    model_config = ConfigDict(populate_by_name=True)

    session_id: Optional[str] = Field(None, alias="sessionId")


class ResearchSessionResponse(BaseModel):
    """Research session summary."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    thesis: Optional[str] = None
    strategy: str
    status: str
    created_at: datetime
    updated_at: datetime
