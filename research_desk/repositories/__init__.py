"""Repository layer for database access."""

from __future__ import annotations

from .base import BaseRepository
from .deliberation_message import DeliberationMessageRepository
from .research_session import ResearchSessionRepository
from .simulated_trade import SimulatedTradeRepository

__all__ = [
    "BaseRepository",
    "DeliberationMessageRepository",
    "ResearchSessionRepository",
    "SimulatedTradeRepository",
]
