"""Service dependency wiring for FastAPI routes."""

from __future__ import annotations

from typing import Optional

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..cache import PageCache, get_page_cache
from ..config.settings import Settings, get_settings
from ..db.session import get_session
from ..services.broker_adapter import BrokerAdapter
from ..services.brokers.alpaca_adapter import AlpacaBrokerAdapter
from ..services.research import ResearchService
from ..services.trading import TradingService

# ============= Application-wide singletons =============

_broker_adapter: Optional[BrokerAdapter] = None


def get_broker_adapter(settings: Settings = Depends(get_settings)) -> BrokerAdapter:
    """Get the broker adapter (application-wide singleton).

    Credentials are checked on first broker call, not here, so routes that
    never reach the broker keep working without them.
    """
    global _broker_adapter
    if _broker_adapter is None:
        _broker_adapter = AlpacaBrokerAdapter(
            api_key=settings.alpaca_api_key,
            api_secret=settings.alpaca_api_secret,
            paper_trading=settings.alpaca_paper,
            base_url=settings.alpaca_base_url,
        )
    return _broker_adapter


# ============= Request-scoped services =============


def get_research_service(
    db: AsyncSession = Depends(get_session),
    page_cache: PageCache = Depends(get_page_cache),
) -> ResearchService:
    return ResearchService(db, page_cache)


def get_trading_service(
    db: AsyncSession = Depends(get_session),
    broker: BrokerAdapter = Depends(get_broker_adapter),
    page_cache: PageCache = Depends(get_page_cache),
    settings: Settings = Depends(get_settings),
) -> TradingService:
    return TradingService(
        db,
        broker,
        page_cache,
        fill_poll_attempts=settings.order_fill_poll_attempts,
        fill_poll_interval=settings.order_fill_poll_interval_seconds,
    )
