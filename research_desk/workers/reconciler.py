"""Background reconciliation of unconfirmed broker cancellations."""

from __future__ import annotations

import asyncio
from typing import Optional

import structlog

from ..cache import PageCache
from ..db.session import DatabaseManager
from ..services.broker_adapter import BrokerAdapter
from ..services.trading import ReconciliationReport, TradingService

logger = structlog.get_logger(__name__)


class CancellationReconciler:
    """Periodically retries broker cancels that were requested but never confirmed."""

    def __init__(
        self,
        db_manager: DatabaseManager,
        broker: BrokerAdapter,
        page_cache: PageCache,
        *,
        interval_seconds: float = 60,
        batch_size: int = 100,
    ):
        self.db_manager = db_manager
        self.broker = broker
        self.page_cache = page_cache
        self.interval_seconds = interval_seconds
        self.batch_size = batch_size
        self._running = False
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        """Start the reconciliation loop."""
        if self._running:
            logger.warning("reconciler_already_running")
            return

        self._running = True
        self._task = asyncio.create_task(self._loop())
        logger.info("reconciler_started", interval_seconds=self.interval_seconds)

    async def stop(self) -> None:
        """Stop the reconciliation loop."""
        if not self._running:
            return

        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("reconciler_stopped")

    async def run_once(self) -> ReconciliationReport:
        """Run a single reconciliation pass in its own database session."""
        async with self.db_manager.session_factory() as session:
            service = TradingService(session, self.broker, self.page_cache)
            return await service.reconcile_cancellations(limit=self.batch_size)

    async def _loop(self) -> None:
        try:
            while self._running:
                try:
                    await self.run_once()
                except Exception as e:
                    logger.error(
                        "reconciler_pass_failed",
                        error=str(e),
                        error_type=type(e).__name__,
                    )
                await asyncio.sleep(self.interval_seconds)
        except asyncio.CancelledError:
            logger.info("reconciler_loop_cancelled")
            raise
