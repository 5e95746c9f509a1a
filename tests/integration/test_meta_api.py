"""Integration tests for the Meta OAuth flow and Graph proxies.

Graph calls go through an httpx.MockTransport, so no request leaves the
test process.
"""

import os
from datetime import datetime, timedelta, timezone
from urllib.parse import parse_qs, urlparse

import httpx
import jwt
import pytest
from fastapi.testclient import TestClient

from convohub.auth.jwt import OAUTH_STATE_TYPE, create_oauth_state
from convohub.config import get_settings
from convohub.infrastructure.meta import MetaGraphClient
from convohub.infrastructure.meta.graph_client import DEFAULT_INSIGHT_METRICS
from convohub.meta.router import get_graph_client
from convohub.models.audit_log import AuditLog
from convohub.models.social_connection import SocialConnection


pytestmark = pytest.mark.integration

ONBOARDING_URL = "https://app.convohub.io/onboarding"


def callback_client(app) -> TestClient:
    """Unauthenticated client that does not follow the onboarding redirect."""
    return TestClient(app, follow_redirects=False)


@pytest.fixture
def meta_settings(monkeypatch):
    monkeypatch.setenv("META_APP_ID", "1234567890")
    monkeypatch.setenv("META_APP_SECRET", "app-secret-value")
    monkeypatch.setenv("META_REDIRECT_URI", "https://api.convohub.io/api/v1/auth/meta/callback")
    monkeypatch.setenv("FRONTEND_ONBOARDING_URL", ONBOARDING_URL)
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


def graph_handler(request: httpx.Request) -> httpx.Response:
    """Happy-path Graph API: code exchange, long-lived exchange, /me, /me/accounts."""
    path = request.url.path
    params = dict(request.url.params)

    if path.endswith("/oauth/access_token"):
        if params.get("grant_type") == "fb_exchange_token":
            return httpx.Response(200, json={"access_token": "long-user-token", "expires_in": 5184000})
        return httpx.Response(200, json={"access_token": "short-user-token"})
    if path.endswith("/me/accounts"):
        return httpx.Response(200, json={"data": [
            {"id": "page-1", "name": "Acme Shop", "access_token": "page-token-1"},
        ]})
    if path.endswith("/me"):
        return httpx.Response(200, json={"id": "fb-user-1", "name": "Jane Admin"})
    return httpx.Response(404, json={"error": {"message": "Unknown path", "code": 803}})


@pytest.fixture
def use_graph(app, meta_settings):
    """Install a MockTransport-backed Graph client; returns a setter for the handler."""
    def install(handler):
        def override():
            with MetaGraphClient.from_settings(meta_settings, transport=httpx.MockTransport(handler)) as graph:
                yield graph

        app.dependency_overrides[get_graph_client] = override

    install(graph_handler)
    return install


def _redirect_params(response) -> dict:
    location = response.headers["location"]
    assert location.startswith(ONBOARDING_URL)
    return {k: v[0] for k, v in parse_qs(urlparse(location).query).items()}


class TestLogin:

    def test_login_url_carries_state(self, admin_client, meta_settings, test_company):
        response = admin_client.get("/api/v1/auth/meta/login")

        assert response.status_code == 200
        query = parse_qs(urlparse(response.json()["url"]).query)
        assert query["client_id"] == ["1234567890"]
        state = jwt.decode(query["state"][0], os.environ["JWT_SECRET"], algorithms=["HS256"])
        assert state["company_id"] == str(test_company.id)

    def test_login_requires_configuration(self, admin_client, monkeypatch):
        monkeypatch.delenv("META_APP_ID", raising=False)
        get_settings.cache_clear()
        try:
            response = admin_client.get("/api/v1/auth/meta/login")
        finally:
            get_settings.cache_clear()

        assert response.status_code == 400
        assert response.json()["detail"] == "META_APP_ID and META_REDIRECT_URI must be configured"

    def test_employee_cannot_login(self, employee_client, meta_settings):
        assert employee_client.get("/api/v1/auth/meta/login").status_code == 403


class TestCallback:

    def test_successful_callback_stores_connections(self, app, use_graph, db_session, test_company):
        state = create_oauth_state(test_company.id)
        client = callback_client(app)

        response = client.get("/api/v1/auth/meta/callback", params={"code": "auth-code", "state": state})

        assert response.status_code == 302
        assert _redirect_params(response) == {"success": "true"}

        connections = {c.id: c for c in db_session.query(SocialConnection).all()}
        assert connections["fb-user-1"].platform_token == "long-user-token"
        assert connections["fb-user-1"].platform_type == "user"
        assert connections["page-1"].platform_name == "Acme Shop"
        assert connections["page-1"].platform_token == "page-token-1"
        assert db_session.query(AuditLog).filter(AuditLog.action == "META_ACCOUNT_CONNECTED").count() == 1

    def test_repeat_callback_updates_tokens(self, app, use_graph, db_session, test_company):
        client = callback_client(app)
        for _ in range(2):
            client.get(
                "/api/v1/auth/meta/callback",
                params={"code": "auth-code", "state": create_oauth_state(test_company.id)},
            )

        assert db_session.query(SocialConnection).count() == 2

    def test_denied_dialog_redirects_with_error(self, app, use_graph):
        response = callback_client(app).get(
            "/api/v1/auth/meta/callback", params={"error": "access_denied"}
        )

        assert response.status_code == 302
        assert _redirect_params(response) == {"error": "access_denied"}

    def test_missing_code(self, app, use_graph, test_company):
        response = callback_client(app).get(
            "/api/v1/auth/meta/callback", params={"state": create_oauth_state(test_company.id)}
        )
        assert response.status_code == 400

    def test_missing_state(self, app, use_graph):
        response = callback_client(app).get("/api/v1/auth/meta/callback", params={"code": "auth-code"})
        assert response.status_code == 400

    def test_invalid_state(self, app, use_graph):
        response = callback_client(app).get(
            "/api/v1/auth/meta/callback", params={"code": "auth-code", "state": "forged"}
        )
        assert _redirect_params(response) == {"error": "invalid_state"}

    def test_expired_state(self, app, use_graph, test_company):
        past = datetime.now(timezone.utc) - timedelta(minutes=20)
        state = jwt.encode(
            {
                "company_id": str(test_company.id),
                "typ": OAUTH_STATE_TYPE,
                "iat": past,
                "exp": past + timedelta(minutes=10),
            },
            os.environ["JWT_SECRET"],
            algorithm="HS256",
        )

        response = callback_client(app).get(
            "/api/v1/auth/meta/callback", params={"code": "auth-code", "state": state}
        )
        assert _redirect_params(response) == {"error": "state_expired"}

    def test_graph_failure(self, app, use_graph, db_session, test_company):
        use_graph(lambda request: httpx.Response(
            400, json={"error": {"message": "Invalid verification code", "code": 100}}
        ))

        response = callback_client(app).get(
            "/api/v1/auth/meta/callback",
            params={"code": "bad-code", "state": create_oauth_state(test_company.id)},
        )

        assert _redirect_params(response) == {"error": "oauth_failed"}
        assert db_session.query(SocialConnection).count() == 0

    @pytest.mark.parametrize("broken_path, payload", [
        ("/me", {"name": "Jane Admin"}),
        ("/me/accounts", {"data": [{"id": "page-1", "name": "Acme Shop"}]}),
    ])
    def test_unexpected_graph_payload(self, app, use_graph, db_session, test_company, broken_path, payload):
        def handler(request):
            if request.url.path.endswith(broken_path):
                return httpx.Response(200, json=payload)
            return graph_handler(request)

        use_graph(handler)
        response = callback_client(app).get(
            "/api/v1/auth/meta/callback",
            params={"code": "auth-code", "state": create_oauth_state(test_company.id)},
        )

        assert response.status_code == 302
        assert _redirect_params(response) == {"error": "oauth_failed"}
        assert db_session.query(SocialConnection).count() == 0


class TestGraphProxies:

    def test_pages(self, admin_client, use_graph):
        response = admin_client.get("/api/v1/auth/meta/pages", params={"user_token": "long-user-token"})

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert response.json()["data"]["total"] == 1

    def test_pages_with_expired_token(self, admin_client, use_graph):
        use_graph(lambda request: httpx.Response(
            400, json={"error": {"message": "Session has expired", "code": 190}}
        ))

        response = admin_client.get("/api/v1/auth/meta/pages", params={"user_token": "stale"})

        assert response.status_code == 403
        assert response.json()["detail"] == "Token expired. Please re-authenticate."

    def test_other_proxy_error_is_bad_request(self, admin_client, use_graph):
        use_graph(lambda request: httpx.Response(
            400, json={"error": {"message": "Session has expired", "code": 190}}
        ))

        response = admin_client.post("/api/v1/auth/meta/page/subscribe", json={
            "page_id": "page-1",
            "page_token": "page-token-1",
        })

        assert response.status_code == 400
        assert response.json()["detail"] == "Session has expired"

    def test_send_message(self, admin_client, use_graph):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            return httpx.Response(200, json={"recipient_id": "psid-1", "message_id": "m_1"})

        use_graph(handler)
        response = admin_client.post("/api/v1/auth/meta/message/send", json={
            "page_id": "page-1",
            "page_token": "page-token-1",
            "recipient_id": "psid-1",
            "text": "Your order has shipped",
        })

        assert response.status_code == 200
        assert response.json()["data"]["message_id"] == "m_1"
        assert seen["path"] == "/v21.0/page-1/messages"

    def test_page_insights(self, admin_client, use_graph):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json={"data": [
                {"name": "page_impressions", "period": "day", "values": [{"value": 42}]},
            ]})

        use_graph(handler)
        response = admin_client.get("/api/v1/auth/meta/page/insights", params={
            "page_id": "page-1",
            "page_token": "page-token-1",
        })

        assert response.status_code == 200
        assert response.json()["data"][0]["name"] == "page_impressions"
        assert seen["path"] == "/v21.0/page-1/insights"
        assert seen["params"]["period"] == "day"
        assert seen["params"]["metric"].split(",") == DEFAULT_INSIGHT_METRICS

    def test_page_insights_with_expired_token(self, admin_client, use_graph):
        use_graph(lambda request: httpx.Response(
            400, json={"error": {"message": "Session has expired", "code": 190}}
        ))

        response = admin_client.get("/api/v1/auth/meta/page/insights", params={
            "page_id": "page-1",
            "page_token": "stale",
        })

        assert response.status_code == 403
        assert response.json()["detail"] == "Token expired. Please re-authenticate."

    def test_page_insights_graph_error(self, admin_client, use_graph):
        use_graph(lambda request: httpx.Response(
            400, json={"error": {"message": "Invalid metric", "code": 100}}
        ))

        response = admin_client.get("/api/v1/auth/meta/page/insights", params={
            "page_id": "page-1",
            "page_token": "page-token-1",
            "metric": "page_bogus",
        })

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid metric"

    def test_connections_are_masked(self, admin_client, db_session, test_company, use_graph):
        db_session.add(SocialConnection(
            id="page-1",
            company_id=test_company.id,
            platform_name="Acme Shop",
            platform_type="page",
            platform_token="page-token-1-secret",
        ))
        db_session.commit()

        body = admin_client.get("/api/v1/auth/meta/connections").json()

        assert body["total"] == 1
        assert body["connections"][0]["platform_token"] == "page-tok****"

    def test_verify_setup_hides_secrets(self, admin_client, meta_settings):
        response = admin_client.get("/api/v1/auth/meta/verify/setup")

        assert response.status_code == 200
        config = response.json()["data"]["config"]
        assert config["app_id"] == "set"
        assert config["app_secret"] == "set"
        assert "app-secret-value" not in response.text


