"""Per-symbol position summaries built from a session's trades."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from ..db.models import SimulatedTrade, TradeSide, TradeStatus

EXCLUDED_STATUSES = frozenset(
    {TradeStatus.CANCELLED.value, TradeStatus.REJECTED.value, TradeStatus.EXPIRED.value}
)

# Net quantities closer to zero than this are flat
FLAT_TOLERANCE = 1e-9


@dataclass
class PositionSummary:
    """Net position in one symbol."""

    symbol: str
    quantity: float = 0.0
    cost_basis: float = 0.0
    avg_cost: float = 0.0
    current_price: float = 0.0
    market_value: float = 0.0
    unrealized_pnl: float = 0.0
    unrealized_pnl_pct: float = 0.0
    trade_ids: List[str] = field(default_factory=list)


def summarize_positions(trades: Iterable[SimulatedTrade]) -> List[PositionSummary]:
    """Aggregate trades into net positions.

    Buys add to and sells subtract from quantity and cost basis. Cancelled,
    rejected and expired trades never held shares and are skipped. The first
    known price in iteration order is used, so pass trades newest first. Flat
    positions are dropped; the rest are sorted by market value, largest first.
    """
    positions: Dict[str, PositionSummary] = {}
    prices: Dict[str, Optional[float]] = {}

    for trade in trades:
        if trade.status in EXCLUDED_STATUSES:
            continue

        position = positions.setdefault(trade.symbol, PositionSummary(symbol=trade.symbol))
        position.trade_ids.append(trade.id)

        sign = 1 if trade.side == TradeSide.BUY.value else -1
        quantity = trade.effective_quantity
        position.quantity += sign * quantity
        position.cost_basis += sign * (trade.filled_price or 0.0) * quantity

        if prices.get(trade.symbol) is None and trade.current_price is not None:
            prices[trade.symbol] = trade.current_price

    summaries = []
    for symbol, position in positions.items():
        if math.isclose(position.quantity, 0.0, abs_tol=FLAT_TOLERANCE):
            continue
        position.current_price = prices.get(symbol) or 0.0
        position.avg_cost = position.cost_basis / abs(position.quantity)
        position.market_value = position.quantity * position.current_price
        position.unrealized_pnl = position.market_value - position.cost_basis
        if position.cost_basis:
            position.unrealized_pnl_pct = position.unrealized_pnl / position.cost_basis * 100
        summaries.append(position)

    summaries.sort(key=lambda p: p.market_value, reverse=True)
    return summaries
