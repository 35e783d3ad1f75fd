"""Pytest configuration and shared fixtures."""

from collections.abc import AsyncGenerator
from datetime import timedelta
from typing import Callable, Dict, List, Optional

import fakeredis.aioredis
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from research_desk.cache import PageCache, RedisManager, get_page_cache
from research_desk.config import Settings, get_settings
from research_desk.core.errors import ExternalServiceError
from research_desk.db.models import (
    DeliberationMessage,
    ResearchSession,
    SimulatedTrade,
    TradeSide,
    TradeStatus,
    utcnow,
)
from research_desk.db.session import DatabaseManager, get_session
from research_desk.dependencies import get_broker_adapter
from research_desk.security import IdentityClient, get_identity_client
from research_desk.services.broker_adapter import BrokerAdapter, OrderRequest, OrderResponse

TEST_JWT_SECRET = "test-secret-key"
OWNER_ID = "user-owner"
OTHER_USER_ID = "user-other"


class FakeBroker(BrokerAdapter):
    """In-memory broker that records calls and can be told to fail."""

    def __init__(self) -> None:
        self.orders: Dict[str, OrderResponse] = {}
        self.submitted: List[OrderRequest] = []
        self.cancel_calls: List[str] = []
        self.status_calls: List[str] = []
        self.prices: Dict[str, float] = {}
        self.fill_on_submit = True
        self.fill_price = 100.0
        self.submit_error: Optional[Exception] = None
        self.cancel_error: Optional[Exception] = None
        self.price_error: Optional[Exception] = None

    def add_order(self, order_id: str, status: TradeStatus = TradeStatus.PENDING, **kwargs) -> OrderResponse:
        fields = {"symbol": "AAPL", "side": TradeSide.BUY, "quantity": 10.0}
        fields.update(kwargs)
        response = OrderResponse(order_id=order_id, status=status, **fields)
        self.orders[order_id] = response
        return response

    async def submit_order(self, order: OrderRequest) -> OrderResponse:
        self.submitted.append(order)
        if self.submit_error is not None:
            raise self.submit_error
        order_id = f"order-{len(self.submitted)}"
        filled = self.fill_on_submit
        response = OrderResponse(
            order_id=order_id,
            client_order_id=f"client-{len(self.submitted)}",
            status=TradeStatus.FILLED if filled else TradeStatus.PENDING,
            symbol=order.symbol,
            side=order.side,
            quantity=order.quantity,
            filled_quantity=order.quantity if filled else 0.0,
            filled_price=self.fill_price if filled else None,
            filled_at=utcnow() if filled else None,
        )
        self.orders[order_id] = response
        return response

    async def cancel_order(self, order_id: str) -> None:
        self.cancel_calls.append(order_id)
        if self.cancel_error is not None:
            raise self.cancel_error
        if order_id in self.orders:
            self.orders[order_id].status = TradeStatus.CANCELLED

    async def get_order_status(self, order_id: str) -> OrderResponse:
        self.status_calls.append(order_id)
        if order_id not in self.orders:
            raise ExternalServiceError("order not found")
        return self.orders[order_id]

    async def get_latest_price(self, symbol: str) -> Optional[float]:
        if self.price_error is not None:
            raise self.price_error
        return self.prices.get(symbol.upper())


@pytest.fixture
async def test_db() -> AsyncGenerator[DatabaseManager, None]:
    """Create a test database with in-memory SQLite."""
    db_manager = DatabaseManager("sqlite+aiosqlite:///:memory:", echo=False)

    await db_manager.create_tables()

    yield db_manager

    await db_manager.drop_tables()
    await db_manager.close()


@pytest.fixture
async def db_session(test_db: DatabaseManager) -> AsyncGenerator[AsyncSession, None]:
    """Provide a database session for tests."""
    async for session in test_db.get_session():
        yield session


@pytest.fixture
async def redis_client() -> AsyncGenerator[fakeredis.aioredis.FakeRedis, None]:
    """Provide a fake Redis client for testing."""
    client = fakeredis.aioredis.FakeRedis(decode_responses=True)
    yield client
    await client.aclose()


@pytest.fixture
def redis_manager(redis_client: fakeredis.aioredis.FakeRedis) -> RedisManager:
    """Provide a Redis manager backed by fakeredis."""
    manager = RedisManager()
    manager._client = redis_client
    return manager


@pytest.fixture
def page_cache(redis_manager: RedisManager) -> PageCache:
    return PageCache(redis_manager, ttl_seconds=60)


@pytest.fixture
def broker() -> FakeBroker:
    return FakeBroker()


@pytest.fixture
def identity() -> IdentityClient:
    return IdentityClient(secret_key=TEST_JWT_SECRET, audience="authenticated")


@pytest.fixture
def auth_headers(identity: IdentityClient) -> Callable[[str], Dict[str, str]]:
    """Build bearer headers for a user ID."""

    def _headers(user_id: str = OWNER_ID) -> Dict[str, str]:
        return {"Authorization": f"Bearer {identity.issue_token(user_id)}"}

    return _headers


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        order_fill_poll_attempts=3,
        order_fill_poll_interval_seconds=0.0,
        redis_enabled=False,
        reconciler_enabled=False,
    )


@pytest.fixture
async def async_client(
    test_db: DatabaseManager,
    broker: FakeBroker,
    page_cache: PageCache,
    identity: IdentityClient,
    test_settings: Settings,
) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client against the app with database, broker, cache and identity overridden."""
    from research_desk.main import app

    async def override_get_session() -> AsyncGenerator[AsyncSession, None]:
        async for session in test_db.get_session():
            yield session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_broker_adapter] = lambda: broker
    app.dependency_overrides[get_page_cache] = lambda: page_cache
    app.dependency_overrides[get_identity_client] = lambda: identity
    app.dependency_overrides[get_settings] = lambda: test_settings

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()


# ============= Seed helpers =============


@pytest.fixture
def make_session(db_session: AsyncSession):
    async def _make(user_id: str = OWNER_ID, **kwargs) -> ResearchSession:
        fields = {"title": "Is AAPL undervalued", "thesis": "Is AAPL undervalued"}
        fields.update(kwargs)
        research_session = ResearchSession(user_id=user_id, **fields)
        db_session.add(research_session)
        await db_session.commit()
        await db_session.refresh(research_session)
        return research_session

    return _make


@pytest.fixture
def make_trade(db_session: AsyncSession):
    async def _make(session_id: str, **kwargs) -> SimulatedTrade:
        fields = {
            "symbol": "AAPL",
            "side": "buy",
            "quantity": 10.0,
            "status": TradeStatus.PENDING.value,
        }
        fields.update(kwargs)
        trade = SimulatedTrade(session_id=session_id, **fields)
        db_session.add(trade)
        await db_session.commit()
        await db_session.refresh(trade)
        return trade

    return _make


@pytest.fixture
def make_messages(db_session: AsyncSession):
    async def _make(session_id: str, turns: List[tuple]) -> List[DeliberationMessage]:
        base = utcnow()
        messages = []
        for offset, (role, content) in enumerate(turns):
            message = DeliberationMessage(
                session_id=session_id,
                role=role,
                content=content,
                created_at=base + timedelta(seconds=offset),
            )
            db_session.add(message)
            messages.append(message)
        await db_session.commit()
        return messages

    return _make
