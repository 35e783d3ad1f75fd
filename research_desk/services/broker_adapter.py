"""Broker adapter interface for paper-trading orders."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..db.models import OrderType, TradeSide, TradeStatus

TERMINAL_STATUSES = frozenset(
    {
        TradeStatus.FILLED,
        TradeStatus.CANCELLED,
        TradeStatus.REJECTED,
        TradeStatus.EXPIRED,
    }
)


@dataclass
class OrderRequest:
    """Order request data structure."""

    symbol: str
    side: TradeSide
    quantity: float
    order_type: OrderType = OrderType.MARKET
    limit_price: Optional[float] = None
    stop_price: Optional[float] = None
    time_in_force: str = "day"


@dataclass
class OrderResponse:
    """Order state as reported by the broker."""

    order_id: str
    status: TradeStatus
    symbol: str
    side: TradeSide
    quantity: float
    filled_quantity: float = 0.0
    filled_price: Optional[float] = None
    client_order_id: Optional[str] = None
    broker_status: Optional[str] = None

    # Timestamps
    filled_at: Optional[datetime] = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES


class BrokerAdapter(ABC):
    """Abstract base class for broker adapters."""

    @abstractmethod
    async def submit_order(self, order: OrderRequest) -> OrderResponse:
        """Submit an order to the broker.

        Args:
            order: Order request

        Returns:
            Order response with execution details
        """

    @abstractmethod
    async def cancel_order(self, order_id: str) -> None:
        """Cancel an existing order by its broker order ID."""

    @abstractmethod
    async def get_order_status(self, order_id: str) -> OrderResponse:
        """Get the current state of an order.

        Args:
            order_id: Broker order ID

        Returns:
            Order response
        """

    @abstractmethod
    async def get_latest_price(self, symbol: str) -> Optional[float]:
        """Get the last traded price for a symbol, or None when unavailable."""
