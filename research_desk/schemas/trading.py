"""Schemas for simulated trading endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class PlaceTradeRequest(BaseModel):
    """Request to place a simulated trade."""

    model_config = ConfigDict(populate_by_name=True)

    session_id: Optional[str] = Field(None, alias="sessionId")
    symbol: Optional[str] = None
    side: Optional[str] = Field(None, description="buy or sell")
    quantity: Optional[float] = None
    order_type: Optional[str] = Field(None, alias="orderType")
    limit_price: Optional[float] = Field(None, alias="limitPrice")
    stop_price: Optional[float] = Field(None, alias="stopPrice")
    investment_thesis: Optional[str] = Field(None, alias="investmentThesis")


class CancelTradeRequest(BaseModel):
    """Request to cancel a trade."""

    model_config = ConfigDict(populate_by_name=True)

    trade_id: Optional[str] = Field(None, alias="tradeId")


class SyncTradeRequest(BaseModel):
    """Request to refresh a trade from the broker."""

    model_config = ConfigDict(populate_by_name=True)

    trade_id: Optional[str] = Field(None, alias="tradeId")


class TradeResponse(BaseModel):
    """Simulated trade as returned to clients."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    session_id: str
    symbol: str
    side: str
    quantity: float
    order_type: str
    limit_price: Optional[float] = None
    stop_price: Optional[float] = None
    broker_order_id: Optional[str] = None
    broker_client_order_id: Optional[str] = None
    filled_price: Optional[float] = None
    filled_quantity: Optional[float] = None
    filled_at: Optional[datetime] = None
    status: str
    current_price: Optional[float] = None
    unrealized_pnl: Optional[float] = None
    realized_pnl: float = 0.0
    investment_thesis: Optional[str] = None
    cancel_requested_at: Optional[datetime] = None
    broker_cancel_confirmed: bool = False
    created_at: datetime
    updated_at: datetime


class PositionResponse(BaseModel):
    """Net position in one symbol."""

    model_config = ConfigDict(from_attributes=True)

    symbol: str
    quantity: float
    cost_basis: float
    avg_cost: float
    current_price: float
    market_value: float
    unrealized_pnl: float
    unrealized_pnl_pct: float
    trade_ids: List[str]
