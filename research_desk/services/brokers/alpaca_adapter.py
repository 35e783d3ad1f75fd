"""Alpaca paper-trading broker adapter."""

from __future__ import annotations

import asyncio
from typing import Any, Optional

import structlog
from alpaca.data.historical import StockHistoricalDataClient
from alpaca.data.requests import StockLatestTradeRequest
from alpaca.trading.client import TradingClient
from alpaca.trading.enums import OrderSide, TimeInForce
from alpaca.trading.requests import (
    LimitOrderRequest,
    MarketOrderRequest,
    StopLimitOrderRequest,
    StopOrderRequest,
)

from ...core.errors import ExternalServiceError, ValidationError
from ...db.models import OrderType, TradeSide, TradeStatus
from ..broker_adapter import BrokerAdapter, OrderRequest, OrderResponse

logger = structlog.get_logger(__name__)

# https://docs.alpaca.markets/docs/orders-at-alpaca#order-lifecycle
STATUS_MAP = {
    "new": TradeStatus.PENDING,
    "accepted": TradeStatus.PENDING,
    "pending_new": TradeStatus.PENDING,
    "accepted_for_bidding": TradeStatus.PENDING,
    "pending_cancel": TradeStatus.PENDING,
    "pending_replace": TradeStatus.PENDING,
    "calculated": TradeStatus.PENDING,
    "held": TradeStatus.PENDING,
    "partially_filled": TradeStatus.PARTIAL,
    "filled": TradeStatus.FILLED,
    "canceled": TradeStatus.CANCELLED,
    "done_for_day": TradeStatus.CANCELLED,
    "replaced": TradeStatus.CANCELLED,
    "stopped": TradeStatus.CANCELLED,
    "suspended": TradeStatus.CANCELLED,
    "expired": TradeStatus.EXPIRED,
    "rejected": TradeStatus.REJECTED,
}


def convert_order_status(alpaca_status: Any) -> TradeStatus:
    """Map an Alpaca order status (enum or string) onto a local trade status."""
    value = str(getattr(alpaca_status, "value", alpaca_status)).lower()
    return STATUS_MAP.get(value, TradeStatus.PENDING)


def _to_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


class AlpacaBrokerAdapter(BrokerAdapter):
    """Broker adapter backed by alpaca-py.

    The SDK is synchronous, so every call runs in a worker thread. Clients
    are created on first use so a process without credentials can still
    start and serve read-only pages.
    """

    def __init__(
        self,
        api_key: Optional[str],
        api_secret: Optional[str],
        paper_trading: bool = True,
        base_url: Optional[str] = None,
    ):
        """Initialize the adapter.

        Args:
            api_key: Alpaca API key ID
            api_secret: Alpaca API secret key
            paper_trading: Use the paper-trading account
            base_url: Optional trading API URL override
        """
        self.api_key = api_key
        self.api_secret = api_secret
        self.paper_trading = paper_trading
        self.base_url = base_url
        self._trading_client: Optional[TradingClient] = None
        self._data_client: Optional[StockHistoricalDataClient] = None

    def _require_credentials(self) -> None:
        if not self.api_key or not self.api_secret:
            raise ExternalServiceError("Alpaca API credentials not configured")

    @property
    def trading_client(self) -> TradingClient:
        if self._trading_client is None:
            self._require_credentials()
            self._trading_client = TradingClient(
                api_key=self.api_key,
                secret_key=self.api_secret,
                paper=self.paper_trading,
                url_override=self.base_url,
            )
        return self._trading_client

    @property
    def data_client(self) -> StockHistoricalDataClient:
        if self._data_client is None:
            self._require_credentials()
            self._data_client = StockHistoricalDataClient(
                api_key=self.api_key,
                secret_key=self.api_secret,
            )
        return self._data_client

    def _build_request(self, order: OrderRequest):
        side = OrderSide.BUY if order.side == TradeSide.BUY else OrderSide.SELL
        common = {
            "symbol": order.symbol.upper(),
            "qty": order.quantity,
            "side": side,
            "time_in_force": TimeInForce(order.time_in_force.lower()),
        }

        if order.order_type == OrderType.MARKET:
            return MarketOrderRequest(**common)

        if order.order_type in (OrderType.LIMIT, OrderType.STOP_LIMIT) and order.limit_price is None:
            raise ValidationError(
                "Limit price required for limit orders",
                details={"symbol": order.symbol, "order_type": order.order_type.value},
            )
        if order.order_type in (OrderType.STOP, OrderType.STOP_LIMIT) and order.stop_price is None:
            raise ValidationError(
                "Stop price required for stop orders",
                details={"symbol": order.symbol, "order_type": order.order_type.value},
            )

        if order.order_type == OrderType.LIMIT:
            return LimitOrderRequest(**common, limit_price=order.limit_price)
        if order.order_type == OrderType.STOP:
            return StopOrderRequest(**common, stop_price=order.stop_price)
        return StopLimitOrderRequest(
            **common, limit_price=order.limit_price, stop_price=order.stop_price
        )

    def _to_response(self, alpaca_order: Any) -> OrderResponse:
        side_value = str(getattr(alpaca_order.side, "value", alpaca_order.side)).lower()
        broker_status = str(getattr(alpaca_order.status, "value", alpaca_order.status))
        return OrderResponse(
            order_id=str(alpaca_order.id),
            client_order_id=(
                str(alpaca_order.client_order_id) if alpaca_order.client_order_id else None
            ),
            status=convert_order_status(alpaca_order.status),
            broker_status=broker_status,
            symbol=alpaca_order.symbol,
            side=TradeSide(side_value),
            quantity=_to_float(alpaca_order.qty) or 0.0,
            filled_quantity=_to_float(alpaca_order.filled_qty) or 0.0,
            filled_price=_to_float(alpaca_order.filled_avg_price),
            filled_at=alpaca_order.filled_at,
        )

    async def submit_order(self, order: OrderRequest) -> OrderResponse:
        """Submit an order to Alpaca.

        Raises:
            ValidationError: Missing price for a limit or stop order
            ExternalServiceError: Alpaca API call failed
        """
        request = self._build_request(order)
        try:
            alpaca_order = await asyncio.to_thread(self.trading_client.submit_order, request)
        except ExternalServiceError:
            raise
        except Exception as e:
            logger.error("alpaca_submit_failed", symbol=order.symbol, error=str(e))
            raise ExternalServiceError(
                str(e) or "Failed to place order",
                details={
                    "symbol": order.symbol,
                    "side": order.side.value,
                    "order_type": order.order_type.value,
                },
            ) from e

        response = self._to_response(alpaca_order)
        logger.info(
            "alpaca_order_submitted",
            order_id=response.order_id,
            side=order.side.value,
            quantity=order.quantity,
            symbol=response.symbol,
        )
        return response

    async def cancel_order(self, order_id: str) -> None:
        """Cancel an order by its Alpaca order ID."""
        try:
            await asyncio.to_thread(self.trading_client.cancel_order_by_id, order_id)
        except ExternalServiceError:
            raise
        except Exception as e:
            raise ExternalServiceError(
                str(e) or "Failed to cancel order",
                details={"order_id": order_id},
            ) from e
        logger.info("alpaca_order_cancelled", order_id=order_id)

    async def get_order_status(self, order_id: str) -> OrderResponse:
        """Fetch an order by its Alpaca order ID."""
        try:
            alpaca_order = await asyncio.to_thread(self.trading_client.get_order_by_id, order_id)
        except ExternalServiceError:
            raise
        except Exception as e:
            raise ExternalServiceError(
                str(e) or "Failed to fetch order",
                details={"order_id": order_id},
            ) from e
        return self._to_response(alpaca_order)

    async def get_latest_price(self, symbol: str) -> Optional[float]:
        """Get the last trade price for a symbol."""
        symbol = symbol.upper()
        request = StockLatestTradeRequest(symbol_or_symbols=symbol)
        try:
            trades = await asyncio.to_thread(self.data_client.get_stock_latest_trade, request)
        except ExternalServiceError:
            raise
        except Exception as e:
            raise ExternalServiceError(
                str(e) or "Failed to fetch latest trade",
                details={"symbol": symbol},
            ) from e

        trade = trades.get(symbol) if trades else None
        if trade is None:
            return None
        return _to_float(trade.price)
