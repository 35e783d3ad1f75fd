"""Unit tests for position summaries and trade pricing."""

import pytest

from research_desk.db.models import SimulatedTrade
from research_desk.services.positions import summarize_positions


def _trade(trade_id, symbol="AAPL", side="buy", quantity=10.0, **kwargs) -> SimulatedTrade:
    fields = {"status": "filled", "filled_price": 100.0, "filled_quantity": quantity}
    fields.update(kwargs)
    return SimulatedTrade(
        id=trade_id, session_id="s-1", symbol=symbol, side=side, quantity=quantity, **fields
    )


class TestApplyMarketPrice:
    def test_buy_pnl(self):
        trade = _trade("t1")

        trade.apply_market_price(110.0)

        assert trade.current_price == 110.0
        assert trade.unrealized_pnl == pytest.approx(100.0)

    def test_sell_pnl(self):
        trade = _trade("t1", side="sell")

        trade.apply_market_price(110.0)

        assert trade.unrealized_pnl == pytest.approx(-100.0)

    def test_unfilled_trade_only_gets_price(self):
        trade = _trade("t1", status="pending", filled_price=None, filled_quantity=None)

        trade.apply_market_price(95.0)

        assert trade.current_price == 95.0
        assert trade.unrealized_pnl is None

    def test_missing_price_leaves_trade_untouched(self):
        trade = _trade("t1", current_price=101.0)

        trade.apply_market_price(None)

        assert trade.current_price == 101.0


class TestSummarizePositions:
    def test_nets_buys_and_sells(self):
        trades = [
            _trade("t2", side="sell", quantity=4.0, filled_price=120.0, current_price=130.0),
            _trade("t1", side="buy", quantity=10.0, filled_price=100.0, current_price=125.0),
        ]

        [position] = summarize_positions(trades)

        assert position.symbol == "AAPL"
        assert position.quantity == pytest.approx(6.0)
        assert position.cost_basis == pytest.approx(1000.0 - 480.0)
        assert position.current_price == 130.0
        assert position.market_value == pytest.approx(780.0)
        assert position.unrealized_pnl == pytest.approx(260.0)
        assert position.trade_ids == ["t2", "t1"]

    def test_flat_positions_are_dropped(self):
        trades = [
            _trade("t2", side="sell", quantity=5.0),
            _trade("t1", side="buy", quantity=5.0),
        ]

        assert summarize_positions(trades) == []

    def test_cancelled_trades_are_skipped(self):
        trades = [
            _trade("t1", status="cancelled", filled_price=None, filled_quantity=None),
            _trade("t2", status="rejected", filled_price=None, filled_quantity=None),
            _trade("t3", symbol="MSFT", current_price=300.0, filled_price=250.0),
        ]

        positions = summarize_positions(trades)

        assert [p.symbol for p in positions] == ["MSFT"]

    def test_sorted_by_market_value(self):
        trades = [
            _trade("t1", symbol="AAPL", current_price=100.0),
            _trade("t2", symbol="MSFT", current_price=400.0),
        ]

        positions = summarize_positions(trades)

        assert [p.symbol for p in positions] == ["MSFT", "AAPL"]

    def test_pending_trade_counts_ordered_quantity(self):
        trades = [_trade("t1", status="pending", filled_price=None, filled_quantity=None)]

        [position] = summarize_positions(trades)

        assert position.quantity == 10.0
        assert position.cost_basis == 0.0
        assert position.unrealized_pnl_pct == 0.0

    def test_fractional_round_trip_is_flat(self):
        """Fractional buys and sells that net to float noise count as flat."""
        trades = [
            _trade("t3", side="sell", quantity=0.3),
            _trade("t2", side="buy", quantity=0.1),
            _trade("t1", side="buy", quantity=0.2),
        ]

        assert summarize_positions(trades) == []
