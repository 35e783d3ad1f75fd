"""Request and response schemas."""

from __future__ import annotations

from .research import (
    CreateResearchRequest,
    CreateResearchResponse,
    DeleteResearchRequest,
    ResearchSessionResponse,
)
from .trading import (
    CancelTradeRequest,
    PlaceTradeRequest,
    PositionResponse,
    SyncTradeRequest,
    TradeResponse,
)

__all__ = [
    "CancelTradeRequest",
    "CreateResearchRequest",
    "CreateResearchResponse",
    "DeleteResearchRequest",
    "PlaceTradeRequest",
    "PositionResponse",
    "ResearchSessionResponse",
    "SyncTradeRequest",
    "TradeResponse",
]
