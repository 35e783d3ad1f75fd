"""Unit tests for the cancellation reconciler worker."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from research_desk.db.models import utcnow
from research_desk.workers import CancellationReconciler


@pytest.mark.unit
class TestCancellationReconciler:
    async def test_run_once_confirms_outstanding_cancel(
        self, test_db, broker, page_cache, db_session, make_session, make_trade
    ):
        research_session = await make_session()
        trade = await make_trade(
            research_session.id,
            status="cancelled",
            broker_order_id="order-x",
            cancel_requested_at=utcnow(),
            broker_cancel_error="timeout",
        )
        broker.add_order("order-x")
        reconciler = CancellationReconciler(test_db, broker, page_cache)

        report = await reconciler.run_once()

        assert report.examined == 1
        assert report.confirmed == 1
        await db_session.refresh(trade)
        assert trade.broker_cancel_confirmed is True

    async def test_start_and_stop(self, test_db, broker, page_cache):
        reconciler = CancellationReconciler(test_db, broker, page_cache, interval_seconds=0.01)

        reconciler.start()
        await asyncio.sleep(0.05)

        assert reconciler.running is True

        await reconciler.stop()

        assert reconciler.running is False

    async def test_failed_pass_does_not_stop_loop(self, test_db, broker, page_cache):
        reconciler = CancellationReconciler(test_db, broker, page_cache, interval_seconds=0.01)
        reconciler.run_once = AsyncMock(side_effect=RuntimeError("db down"))

        reconciler.start()
        await asyncio.sleep(0.05)
        await reconciler.stop()

        assert reconciler.run_once.await_count > 1
