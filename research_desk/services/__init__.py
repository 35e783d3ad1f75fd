"""Service layer."""

from __future__ import annotations

from .broker_adapter import BrokerAdapter, OrderRequest, OrderResponse
from .positions import PositionSummary, summarize_positions
from .research import ResearchService, derive_title
from .trading import ReconciliationReport, TradeResult, TradingService

__all__ = [
    "BrokerAdapter",
    "OrderRequest",
    "OrderResponse",
    "PositionSummary",
    "ReconciliationReport",
    "ResearchService",
    "TradeResult",
    "TradingService",
    "derive_title",
    "summarize_positions",
]
