"""Service layer for simulated trades mirrored to the paper brokerage."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import List, Optional

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..cache import PageCache, research_page_path
from ..core.errors import (
    AuthorizationError,
    ExternalServiceError,
    PersistenceError,
    ResourceNotFoundError,
    ValidationError,
)
from ..db.models import OrderType, SimulatedTrade, TradeSide, TradeStatus, utcnow
from ..repositories import ResearchSessionRepository, SimulatedTradeRepository
from .broker_adapter import BrokerAdapter, OrderRequest, OrderResponse
from .positions import PositionSummary, summarize_positions

logger = structlog.get_logger(__name__)


@dataclass
class TradeResult:
    """A trade after a broker round trip, with the message shown to the user."""

    trade: SimulatedTrade
    message: str


@dataclass
class ReconciliationReport:
    """Outcome of one reconciliation pass."""

    examined: int = 0
    confirmed: int = 0
    failed: int = 0


def _format_price(price: Optional[float]) -> str:
    return f"{price or 0.0:.2f}"


class TradingService:
    """Places, cancels, syncs and lists simulated trades for their owner."""

    def __init__(
        self,
        session: AsyncSession,
        broker: BrokerAdapter,
        page_cache: PageCache,
        *,
        fill_poll_attempts: int = 10,
        fill_poll_interval: float = 0.5,
    ):
        self.session = session
        self.broker = broker
        self.page_cache = page_cache
        self.sessions = ResearchSessionRepository(session)
        self.trades = SimulatedTradeRepository(session)
        self.fill_poll_attempts = fill_poll_attempts
        self.fill_poll_interval = fill_poll_interval

    async def _get_owned_trade(self, *, user_id: str, trade_id: Optional[str]) -> SimulatedTrade:
        """Load a trade and check its parent session belongs to ``user_id``.

        Raises:
            ValidationError: Missing trade ID
            ResourceNotFoundError: No such trade
            AuthorizationError: The trade's session belongs to someone else
        """
        if not trade_id:
            raise ValidationError("Trade ID is required")

        found = await self.trades.get_with_owner(trade_id)
        if found is None:
            raise ResourceNotFoundError("Trade not found", details={"trade_id": trade_id})

        trade, owner_id = found
        if owner_id != user_id:
            logger.warning("trade_access_denied", trade_id=trade_id, user_id=user_id)
            raise AuthorizationError("Unauthorized")
        return trade

    async def _latest_price(self, symbol: str) -> Optional[float]:
        """Best-effort last trade price; failures only cost the price."""
        try:
            return await self.broker.get_latest_price(symbol)
        except ExternalServiceError as exc:
            logger.info("latest_price_unavailable", symbol=symbol, error=exc.message)
            return None

    async def _save(self, trade: SimulatedTrade, fields: dict, *, error_message: str) -> SimulatedTrade:
        # Rollback expires the instance, so read the id first
        trade_id = trade.id
        try:
            return await self.trades.update(db_obj=trade, obj_in=fields)
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.error("trade_update_failed", trade_id=trade_id, error=str(exc))
            raise PersistenceError(error_message) from exc

    async def place_trade(
        self,
        *,
        user_id: str,
        session_id: Optional[str],
        symbol: Optional[str],
        side: Optional[str],
        quantity: Optional[float],
        order_type: Optional[str] = None,
        limit_price: Optional[float] = None,
        stop_price: Optional[float] = None,
        investment_thesis: Optional[str] = None,
    ) -> TradeResult:
        """Submit an order to the broker and record it as a simulated trade.

        Market orders are polled briefly so an immediate fill is captured in
        the stored row.

        Raises:
            ValidationError: Missing or invalid order fields
            ResourceNotFoundError: Session missing or owned by someone else
            ExternalServiceError: The broker rejected or failed the order
            PersistenceError: The trade row could not be written
        """
        if not session_id or not symbol or not side or not quantity:
            raise ValidationError("Missing required fields")
        if quantity <= 0:
            raise ValidationError("Quantity must be positive")
        try:
            trade_side = TradeSide(side)
        except ValueError as exc:
            raise ValidationError("Invalid side") from exc
        try:
            trade_order_type = OrderType(order_type or OrderType.MARKET.value)
        except ValueError as exc:
            raise ValidationError("Invalid order type") from exc

        if await self.sessions.get_for_user(session_id, user_id) is None:
            raise ResourceNotFoundError("Session not found")

        order = await self.broker.submit_order(
            OrderRequest(
                symbol=symbol.upper(),
                side=trade_side,
                quantity=quantity,
                order_type=trade_order_type,
                limit_price=limit_price,
                stop_price=stop_price,
            )
        )
        if trade_order_type == OrderType.MARKET and order.status != TradeStatus.FILLED:
            order = await self._wait_for_fill(order)

        filled = order.status == TradeStatus.FILLED
        trade = SimulatedTrade(
            session_id=session_id,
            symbol=symbol.upper(),
            side=trade_side.value,
            quantity=quantity,
            order_type=trade_order_type.value,
            limit_price=limit_price,
            stop_price=stop_price,
            broker_order_id=order.order_id,
            broker_client_order_id=order.client_order_id,
            filled_price=order.filled_price,
            filled_quantity=order.filled_quantity or None,
            filled_at=order.filled_at,
            status=TradeStatus.FILLED.value if filled else TradeStatus.PENDING.value,
            investment_thesis=investment_thesis,
        )
        trade.apply_market_price(await self._latest_price(trade.symbol))

        try:
            trade = await self.trades.create(trade)
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.error("trade_insert_failed", order_id=order.order_id, error=str(exc))
            raise PersistenceError("Failed to save trade") from exc

        await self.page_cache.invalidate(research_page_path(session_id))
        logger.info(
            "trade_placed",
            trade_id=trade.id,
            order_id=order.order_id,
            symbol=trade.symbol,
            side=trade.side,
            status=trade.status,
        )

        if filled:
            message = f"Order filled at ${_format_price(order.filled_price)}"
        else:
            message = "Order placed successfully"
        return TradeResult(trade=trade, message=message)

    async def _wait_for_fill(self, order: OrderResponse) -> OrderResponse:
        for _ in range(self.fill_poll_attempts):
            await asyncio.sleep(self.fill_poll_interval)
            order = await self.broker.get_order_status(order.order_id)
            if order.status in (TradeStatus.FILLED, TradeStatus.PARTIAL):
                break
        return order

    async def cancel_trade(self, *, user_id: str, trade_id: Optional[str]) -> SimulatedTrade:
        """Cancel a trade owned by ``user_id``.

        A pending trade with a broker order goes through two recorded phases:
        the cancel request is persisted first, then the broker cancel is
        attempted and its outcome stored. A broker failure never blocks the
        local transition to ``cancelled``; the reconciler retries it later.

        Raises:
            ValidationError: Missing trade ID
            ResourceNotFoundError: No such trade
            AuthorizationError: The trade belongs to another user
            PersistenceError: The status update did not commit
        """
        trade = await self._get_owned_trade(user_id=user_id, trade_id=trade_id)

        if trade.status == TradeStatus.PENDING.value and trade.broker_order_id:
            trade = await self._save(
                trade,
                {"cancel_requested_at": utcnow(), "broker_cancel_error": None},
                error_message="Failed to cancel trade",
            )
            await self._attempt_broker_cancel(trade)

        trade = await self._save(
            trade,
            {"status": TradeStatus.CANCELLED.value, "updated_at": utcnow()},
            error_message="Failed to cancel trade",
        )
        await self.page_cache.invalidate(research_page_path(trade.session_id))
        logger.info(
            "trade_cancelled",
            trade_id=trade.id,
            broker_cancel_confirmed=trade.broker_cancel_confirmed,
        )
        return trade

    async def _attempt_broker_cancel(self, trade: SimulatedTrade) -> bool:
        """Ask the broker to cancel; record the outcome on the trade without committing."""
        try:
            await self.broker.cancel_order(trade.broker_order_id)
        except Exception as exc:
            logger.warning(
                "broker_cancel_failed",
                trade_id=trade.id,
                order_id=trade.broker_order_id,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            trade.broker_cancel_error = str(exc) or type(exc).__name__
            return False

        trade.broker_cancel_confirmed = True
        trade.broker_cancel_error = None
        return True

    @staticmethod
    def _apply_fill(trade: SimulatedTrade, order: OrderResponse) -> None:
        """Copy whatever fill details the broker reports onto the trade."""
        if order.filled_price is not None:
            trade.filled_price = order.filled_price
        if order.filled_quantity:
            trade.filled_quantity = order.filled_quantity
        if order.filled_at is not None:
            trade.filled_at = order.filled_at

    async def sync_trade(self, *, user_id: str, trade_id: Optional[str]) -> TradeResult:
        """Refresh a trade from the broker's view of its order.

        Raises:
            ValidationError: Missing trade ID or no broker order on the trade
            ResourceNotFoundError: No such trade
            AuthorizationError: The trade belongs to another user
            ExternalServiceError: The broker lookup failed
            PersistenceError: The update did not commit
        """
        trade = await self._get_owned_trade(user_id=user_id, trade_id=trade_id)
        if not trade.broker_order_id:
            raise ValidationError("No broker order ID associated with this trade")

        order = await self.broker.get_order_status(trade.broker_order_id)
        price = await self._latest_price(trade.symbol)

        self._apply_fill(trade, order)
        trade.apply_market_price(price)
        trade = await self._save(
            trade,
            {"status": order.status.value, "updated_at": utcnow()},
            error_message="Failed to update trade",
        )
        await self.page_cache.invalidate(research_page_path(trade.session_id))

        if order.status == TradeStatus.FILLED:
            message = f"Order filled at ${_format_price(order.filled_price)}"
        else:
            message = f"Order updated: {order.status.value}"
        return TradeResult(trade=trade, message=message)

    async def list_trades(
        self, *, user_id: str, session_id: Optional[str]
    ) -> tuple[List[SimulatedTrade], List[PositionSummary]]:
        """A session's trades, newest first, with refreshed prices and net positions.

        Raises:
            ValidationError: Missing session ID
            ResourceNotFoundError: Session missing or owned by someone else
        """
        if not session_id:
            raise ValidationError("Session ID is required")
        if await self.sessions.get_for_user(session_id, user_id) is None:
            raise ResourceNotFoundError("Session not found")

        trades = await self.trades.list_by_session(session_id)
        prices: dict[str, Optional[float]] = {}
        for symbol in {trade.symbol for trade in trades}:
            prices[symbol] = await self._latest_price(symbol)

        refreshed = []
        for trade in trades:
            price = prices.get(trade.symbol)
            if price is not None:
                trade.apply_market_price(price)
                trade.updated_at = utcnow()
                self.session.add(trade)
            refreshed.append(trade)
        if any(price is not None for price in prices.values()):
            await self.session.commit()

        return refreshed, summarize_positions(refreshed)

    async def reconcile_cancellations(self, *, limit: int = 100) -> ReconciliationReport:
        """Retry broker cancellation for trades whose cancel was never confirmed.

        An order the broker already reports as terminal counts as confirmed.
        A trade still ``pending`` with a recorded request (the process stopped
        between the two phases) takes the broker's terminal status and fill
        details, or becomes ``cancelled`` once the broker confirms the cancel.
        It stays ``pending`` while the broker cannot be reached.
        """
        report = ReconciliationReport()
        for trade in await self.trades.list_unconfirmed_cancellations(limit=limit):
            report.examined += 1
            was_pending = trade.status == TradeStatus.PENDING.value
            fields: dict = {"updated_at": utcnow()}

            order: Optional[OrderResponse] = None
            try:
                order = await self.broker.get_order_status(trade.broker_order_id)
            except ExternalServiceError as exc:
                logger.warning(
                    "reconcile_status_lookup_failed",
                    trade_id=trade.id,
                    order_id=trade.broker_order_id,
                    error=exc.message,
                )

            if order is not None and order.is_terminal:
                confirmed = True
                trade.broker_cancel_confirmed = True
                trade.broker_cancel_error = None
                if order.status == TradeStatus.FILLED:
                    trade.broker_cancel_error = "Order filled before cancellation"
                if was_pending:
                    self._apply_fill(trade, order)
                    fields["status"] = order.status.value
            else:
                confirmed = await self._attempt_broker_cancel(trade)
                if confirmed and was_pending:
                    fields["status"] = TradeStatus.CANCELLED.value

            trade = await self._save(trade, fields, error_message="Failed to reconcile trade")
            if "status" in fields:
                await self.page_cache.invalidate(research_page_path(trade.session_id))
                logger.info(
                    "pending_trade_reconciled",
                    trade_id=trade.id,
                    status=fields["status"],
                )

            if confirmed:
                report.confirmed += 1
            else:
                report.failed += 1

        if report.examined:
            logger.info(
                "cancellations_reconciled",
                examined=report.examined,
                confirmed=report.confirmed,
                failed=report.failed,
            )
        return report
