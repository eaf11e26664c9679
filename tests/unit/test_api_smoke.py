"""HTTP-level checks that need neither PostgreSQL nor Redis."""

from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock, patch

from httpx import AsyncClient
from solders.pubkey import Pubkey

from config.settings import settings
from src.main import app
from src.sb_account.domain.models import AuthorityMeta
from src.sb_common.database import get_db_session
from src.sb_gateway.auth.jwt_handler import create_access_token
from src.sb_market.api import router as market_router

USER = str(Pubkey.from_bytes(bytes([9]) * 32))


def _auth(identity: str = USER) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(identity)}"}


class TestHealth:
    async def test_health(self, client: AsyncClient) -> None:
        resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"

    async def test_request_id_header(self, client: AsyncClient) -> None:
        resp = await client.get("/health")
        assert resp.headers["X-Request-ID"]

    async def test_inbound_request_id_echoed(self, client: AsyncClient) -> None:
        resp = await client.get("/health", headers={"X-Request-ID": "edge-42"})
        assert resp.headers["X-Request-ID"] == "edge-42"

    async def test_malformed_request_id_replaced(self, client: AsyncClient) -> None:
        resp = await client.get("/health", headers={"X-Request-ID": "bad id!"})
        assert resp.headers["X-Request-ID"].startswith("req_")

    async def test_error_envelope_carries_inbound_id(self, client: AsyncClient) -> None:
        with patch.object(settings, "AIRDROP_ENABLED", False):
            resp = await client.post(
                "/api/v1/account/airdrop",
                json={"lamports": 1},
                headers={**_auth(), "X-Request-ID": "edge-43"},
            )
        assert resp.json()["request_id"] == "edge-43"


class TestAuthRequired:
    async def test_balance_without_token(self, client: AsyncClient) -> None:
        resp = await client.get("/api/v1/account/balance")
        assert resp.status_code == 401

    async def test_bad_token(self, client: AsyncClient) -> None:
        resp = await client.post(
            "/api/v1/account/airdrop",
            json={"lamports": 1},
            headers={"Authorization": "Bearer garbage"},
        )
        assert resp.status_code == 401

    async def test_withdraw_requires_host(self, client: AsyncClient) -> None:
        resp = await client.post(f"/api/v1/markets/{USER}/withdraw-fees", headers=_auth())
        assert resp.status_code == 403
        assert resp.json()["code"] == 1002


class TestAirdrop:
    async def test_disabled(self, client: AsyncClient) -> None:
        with patch.object(settings, "AIRDROP_ENABLED", False):
            resp = await client.post(
                "/api/v1/account/airdrop", json={"lamports": 1_000}, headers=_auth()
            )
        assert resp.status_code == 403
        body = resp.json()
        assert body["code"] == 2005
        assert body["data"] is None

    async def test_rejects_zero(self, client: AsyncClient) -> None:
        resp = await client.post("/api/v1/account/airdrop", json={"lamports": 0}, headers=_auth())
        assert resp.status_code == 422


class TestMarketValidation:
    async def test_long_title_is_label_too_long(self, client: AsyncClient) -> None:
        async def _session() -> AsyncGenerator[AsyncMock, None]:
            yield AsyncMock()

        accounts = AsyncMock()
        accounts.get_authority_meta.return_value = AuthorityMeta(
            address="meta", authority=USER, next_cycle=0, bump=255
        )
        app.dependency_overrides[get_db_session] = _session
        try:
            with patch.object(market_router._service, "_accounts", accounts):
                resp = await client.post(
                    "/api/v1/markets",
                    json={"title": "x" * 65, "label_yes": "A", "label_no": "B"},
                    headers=_auth(),
                )
        finally:
            app.dependency_overrides.pop(get_db_session, None)
        assert resp.status_code == 422
        body = resp.json()
        assert body["code"] == 3004
        assert body["data"] is None


class TestNewRoutesRequireAuth:
    async def test_bet_without_token(self, client: AsyncClient) -> None:
        resp = await client.post(
            f"/api/v1/markets/{USER}/bet", json={"side": 0, "amount": 1}
        )
        assert resp.status_code == 401

    async def test_current_market_without_token(self, client: AsyncClient) -> None:
        resp = await client.get(f"/api/v1/authority-meta/{USER}/current-market")
        assert resp.status_code == 401
