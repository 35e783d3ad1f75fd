"""Enumerations and helpers shared by the table models."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum


def utcnow() -> datetime:
    """Timezone-aware UTC timestamp, the form every table stores."""
    return datetime.now(timezone.utc)


class ResearchStrategy(str, Enum):
    """Investment strategy a research session is framed around."""

    VALUE = "value"
    SPECIAL_SITS = "special-sits"
    DISTRESSED = "distressed"
    GENERAL = "general"


class SessionStatus(str, Enum):
    """Lifecycle stage of a research session."""

    RESEARCHING = "researching"
    COUNCIL_GATHER = "council_gather"
    COUNCIL_DEBATE = "council_debate"
    DELIBERATION = "deliberation"
    FINALIZED = "finalized"


class TradeSide(str, Enum):
    """Order side."""

    BUY = "buy"
    SELL = "sell"


class OrderType(str, Enum):
    """Order type enumeration."""

    MARKET = "market"
    LIMIT = "limit"
    STOP = "stop"
    STOP_LIMIT = "stop_limit"


class TradeStatus(str, Enum):
    """Local status of a simulated trade."""

    PENDING = "pending"
    FILLED = "filled"
    PARTIAL = "partial"
    CANCELLED = "cancelled"
    REJECTED = "rejected"
    EXPIRED = "expired"


class MessageRole(str, Enum):
    """Author of a deliberation message."""

    USER = "user"
    ASSISTANT = "assistant"
    GEMINI = "gemini"
    CHATGPT = "chatgpt"
    CLAUDE = "claude"
