"""Simulated trade model mirrored to a paper brokerage order."""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import uuid4

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from .common import OrderType, TradeSide, TradeStatus, utcnow


class SimulatedTrade(SQLModel, table=True):
    """Trade record owned (through its session) by a single user."""

    __tablename__ = "simulated_trades"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True, max_length=36)
    session_id: str = Field(foreign_key="research_sessions.id", index=True, max_length=36)

    symbol: str = Field(index=True, max_length=20)
    side: str = Field(max_length=4)  # buy, sell
    quantity: float
    order_type: str = Field(default=OrderType.MARKET.value, max_length=20)
    limit_price: Optional[float] = Field(default=None)
    stop_price: Optional[float] = Field(default=None)

    # Brokerage order identifiers
    broker_order_id: Optional[str] = Field(default=None, index=True, max_length=64)
    broker_client_order_id: Optional[str] = Field(default=None, max_length=64)

    # Execution details
    filled_price: Optional[float] = Field(default=None)
    filled_quantity: Optional[float] = Field(default=None)
    filled_at: Optional[datetime] = Field(
        default=None, sa_type=DateTime(timezone=True)
    )
    status: str = Field(default=TradeStatus.PENDING.value, max_length=20, index=True)

    # Valuation
    current_price: Optional[float] = Field(default=None)
    unrealized_pnl: Optional[float] = Field(default=None)
    realized_pnl: float = Field(default=0.0)

    investment_thesis: Optional[str] = Field(default=None)

    # Cancellation bookkeeping: request recorded before the broker call,
    # confirmation or error recorded after it.
    cancel_requested_at: Optional[datetime] = Field(
        default=None, index=True, sa_type=DateTime(timezone=True)
    )
    broker_cancel_confirmed: bool = Field(default=False)
    broker_cancel_error: Optional[str] = Field(default=None)

    created_at: datetime = Field(
        default_factory=utcnow, index=True, sa_type=DateTime(timezone=True)
    )
    updated_at: datetime = Field(
        default_factory=utcnow, sa_type=DateTime(timezone=True)
    )

    @property
    def effective_quantity(self) -> float:
        """Filled quantity when known, otherwise the ordered quantity."""
        if self.filled_quantity:
            return self.filled_quantity
        return self.quantity

    def apply_market_price(self, price: Optional[float]) -> None:
        """Record the latest market price and recompute unrealized P&L."""
        if price is None:
            return
        self.current_price = price
        if self.filled_price is None or not self.filled_quantity:
            return
        if self.side == TradeSide.BUY.value:
            self.unrealized_pnl = (price - self.filled_price) * self.filled_quantity
        else:
            self.unrealized_pnl = (self.filled_price - price) * self.filled_quantity
