"""Integration tests for research session endpoints."""

from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select

from research_desk.db.models import ResearchSession
from research_desk.repositories import ResearchSessionRepository


@pytest.mark.integration
class TestCreateResearchSession:
    """POST /api/research/create."""

    async def test_requires_authentication(self, async_client: AsyncClient, db_session):
        """Anonymous callers get 401 and nothing is written."""
        response = await async_client.post(
            "/api/research/create", json={"thesis": "Is AAPL undervalued"}
        )

        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}
        rows = (await db_session.execute(select(ResearchSession))).scalars().all()
        assert rows == []

    async def test_invalid_token_is_unauthorized(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/research/create",
            json={"thesis": "Is AAPL undervalued"},
            headers={"Authorization": "Bearer not-a-token"},
        )

        assert response.status_code == 401

    async def test_thesis_is_required(self, async_client: AsyncClient, auth_headers, db_session):
        response = await async_client.post(
            "/api/research/create", json={"title": "No thesis"}, headers=auth_headers()
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Thesis is required"}
        rows = (await db_session.execute(select(ResearchSession))).scalars().all()
        assert rows == []

    async def test_malformed_body(self, async_client: AsyncClient, auth_headers):
        response = await async_client.post(
            "/api/research/create",
            content=b"{not json",
            headers={**auth_headers(), "Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request body"}

    async def test_invalid_strategy(self, async_client: AsyncClient, auth_headers):
        response = await async_client.post(
            "/api/research/create",
            json={"thesis": "Buy the dip", "strategy": "momentum"},
            headers=auth_headers(),
        )

        assert response.status_code == 400
        assert response.json()["error"].startswith("Invalid strategy")

    async def test_create_session(self, async_client: AsyncClient, auth_headers, db_session):
        response = await async_client.post(
            "/api/research/create",
            json={"thesis": "Is AAPL undervalued", "strategy": "value"},
            headers=auth_headers("user-owner"),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["strategy"] == "value"

        created = await db_session.get(ResearchSession, data["sessionId"])
        assert created is not None
        assert created.user_id == "user-owner"
        assert created.title == "Is AAPL undervalued..."
        assert created.status == "researching"

    async def test_null_strategy_is_rejected(
        self, async_client: AsyncClient, auth_headers, db_session
    ):
        response = await async_client.post(
            "/api/research/create",
            json={"thesis": "Something", "strategy": None},
            headers=auth_headers(),
        )

        assert response.status_code == 400
        assert response.json()["error"].startswith("Invalid strategy")
        rows = (await db_session.execute(select(ResearchSession))).scalars().all()
        assert rows == []

    async def test_insert_failure(self, async_client: AsyncClient, auth_headers):
        with patch.object(
            ResearchSessionRepository,
            "create",
            new=AsyncMock(side_effect=SQLAlchemyError("disk full")),
        ):
            response = await async_client.post(
                "/api/research/create",
                json={"thesis": "Is AAPL undervalued"},
                headers=auth_headers(),
            )

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to create research session"}

    async def test_defaults_to_general_strategy(self, async_client: AsyncClient, auth_headers):
        response = await async_client.post(
            "/api/research/create",
            json={"thesis": "Something", "title": "Explicit"},
            headers=auth_headers(),
        )

        assert response.status_code == 200
        assert response.json()["strategy"] == "general"


@pytest.mark.integration
class TestListAndDeleteResearchSessions:
    """GET /api/research and DELETE /api/research/delete."""

    async def test_list_own_sessions(self, async_client: AsyncClient, auth_headers, make_session):
        await make_session("user-owner", title="Mine")
        await make_session("user-other", title="Theirs")

        response = await async_client.get("/api/research", headers=auth_headers("user-owner"))

        assert response.status_code == 200
        assert [s["title"] for s in response.json()["sessions"]] == ["Mine"]

    async def test_list_requires_authentication(self, async_client: AsyncClient):
        response = await async_client.get("/api/research")

        assert response.status_code == 401

    async def test_delete_session(
        self, async_client: AsyncClient, auth_headers, make_session, make_trade, db_session
    ):
        research_session = await make_session("user-owner")
        await make_trade(research_session.id)

        response = await async_client.request(
            "DELETE",
            "/api/research/delete",
            json={"sessionId": research_session.id},
            headers=auth_headers("user-owner"),
        )

        assert response.status_code == 200
        assert response.json() == {"success": True}
        rows = (await db_session.execute(select(ResearchSession))).scalars().all()
        assert rows == []

    async def test_delete_other_users_session(
        self, async_client: AsyncClient, auth_headers, make_session, db_session
    ):
        research_session = await make_session("user-other")

        response = await async_client.request(
            "DELETE",
            "/api/research/delete",
            json={"sessionId": research_session.id},
            headers=auth_headers("user-owner"),
        )

        assert response.status_code == 404
        assert response.json() == {"error": "Session not found"}

    async def test_delete_requires_session_id(self, async_client: AsyncClient, auth_headers):
        response = await async_client.request(
            "DELETE", "/api/research/delete", json={}, headers=auth_headers()
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Session ID is required"}
