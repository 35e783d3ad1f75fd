"""Database package."""

from __future__ import annotations

from sqlmodel import SQLModel

from .models import DeliberationMessage, ResearchSession, SimulatedTrade
from .session import DatabaseManager, get_db_manager, get_session, init_db

__all__ = [
    "DatabaseManager",
    "DeliberationMessage",
    "ResearchSession",
    "SQLModel",
    "SimulatedTrade",
    "get_db_manager",
    "get_session",
    "init_db",
]
