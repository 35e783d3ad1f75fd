"""Table models."""

from __future__ import annotations

from .common import (
    MessageRole,
    OrderType,
    ResearchStrategy,
    SessionStatus,
    TradeSide,
    TradeStatus,
    utcnow,
)
from .deliberation_message import DeliberationMessage
from .research_session import ResearchSession
from .simulated_trade import SimulatedTrade

__all__ = [
    "DeliberationMessage",
    "MessageRole",
    "OrderType",
    "ResearchSession",
    "ResearchStrategy",
    "SessionStatus",
    "SimulatedTrade",
    "TradeSide",
    "TradeStatus",
    "utcnow",
]
