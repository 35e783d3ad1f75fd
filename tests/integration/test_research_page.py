"""Integration tests for the research session dashboard page."""

import pytest
from httpx import AsyncClient

from research_desk.cache import research_page_path


@pytest.mark.integration
class TestResearchSessionPage:
    """GET /dashboard/research/{session_id}."""

    async def test_owner_sees_deliberation_in_order(
        self, async_client: AsyncClient, auth_headers, make_session, make_messages
    ):
        research_session = await make_session(title="AAPL deep dive")
        await make_messages(
            research_session.id,
            [
                ("user", "Is AAPL undervalued?"),
                ("claude", "Margins look stable."),
                ("gemini", "Buybacks are doing the work."),
            ],
        )

        response = await async_client.get(
            f"/dashboard/research/{research_session.id}", headers=auth_headers()
        )

        assert response.status_code == 200
        html = response.text
        assert "AAPL deep dive" in html
        first = html.index("Is AAPL undervalued?")
        second = html.index("Margins look stable.")
        third = html.index("Buybacks are doing the work.")
        assert first < second < third
        assert 'class="bubble-row right" data-role="user"' in html
        assert 'class="bubble-row left" data-role="agent"' in html

    async def test_empty_transcript(self, async_client: AsyncClient, auth_headers, make_session):
        research_session = await make_session()

        response = await async_client.get(
            f"/dashboard/research/{research_session.id}", headers=auth_headers()
        )

        assert response.status_code == 200
        assert "No messages yet." in response.text

    async def test_message_content_is_escaped(
        self, async_client: AsyncClient, auth_headers, make_session, make_messages
    ):
        research_session = await make_session()
        await make_messages(research_session.id, [("user", "<script>alert(1)</script>")])

        response = await async_client.get(
            f"/dashboard/research/{research_session.id}", headers=auth_headers()
        )

        assert "<script>alert(1)</script>" not in response.text
        assert "&lt;script&gt;" in response.text

    async def test_other_user_gets_not_found(
        self, async_client: AsyncClient, auth_headers, make_session
    ):
        research_session = await make_session("user-other")

        response = await async_client.get(
            f"/dashboard/research/{research_session.id}", headers=auth_headers("user-owner")
        )

        assert response.status_code == 404
        assert "This page could not be found." in response.text

    async def test_anonymous_gets_not_found(self, async_client: AsyncClient, make_session):
        research_session = await make_session()

        response = await async_client.get(f"/dashboard/research/{research_session.id}")

        assert response.status_code == 404

    async def test_unknown_session(self, async_client: AsyncClient, auth_headers):
        response = await async_client.get("/dashboard/research/does-not-exist", headers=auth_headers())

        assert response.status_code == 404

    async def test_cookie_authentication(
        self, async_client: AsyncClient, identity, make_session
    ):
        research_session = await make_session()

        response = await async_client.get(
            f"/dashboard/research/{research_session.id}",
            headers={"Cookie": f"{identity.cookie_name}={identity.issue_token('user-owner')}"},
        )

        assert response.status_code == 200

    async def test_cancel_refreshes_cached_page(
        self, async_client: AsyncClient, auth_headers, page_cache, make_session, make_trade
    ):
        """A cached page is rendered again after one of its trades is cancelled."""
        research_session = await make_session()
        trade = await make_trade(research_session.id)
        page_url = f"/dashboard/research/{research_session.id}"

        first = await async_client.get(page_url, headers=auth_headers())
        assert '<td class="status">pending</td>' in first.text
        assert await page_cache.get(research_page_path(research_session.id)) is not None

        cancel = await async_client.post(
            "/api/trading/cancel", json={"tradeId": trade.id}, headers=auth_headers()
        )
        assert cancel.status_code == 200

        second = await async_client.get(page_url, headers=auth_headers())
        assert '<td class="status">cancelled</td>' in second.text

    async def test_cached_page_is_not_served_to_other_users(
        self, async_client: AsyncClient, auth_headers, page_cache, make_session
    ):
        research_session = await make_session("user-owner")
        await page_cache.set(research_page_path(research_session.id), "<html>cached</html>")

        response = await async_client.get(
            f"/dashboard/research/{research_session.id}", headers=auth_headers("user-other")
        )

        assert response.status_code == 404
        assert "cached" not in response.text


@pytest.mark.integration
class TestHealthEndpoint:
    async def test_health(self, async_client: AsyncClient):
        response = await async_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
