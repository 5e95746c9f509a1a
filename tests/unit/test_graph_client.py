"""Unit tests for the Meta Graph client using httpx.MockTransport"""

import json

import httpx
import pytest

from convohub.infrastructure.meta import MetaGraphClient, MetaGraphError


def _client(handler, app_id="app-id", app_secret="app-secret"):
    return MetaGraphClient(
        app_id=app_id,
        app_secret=app_secret,
        redirect_uri="https://api.convohub.io/api/v1/auth/meta/callback",
        transport=httpx.MockTransport(handler),
    )


class TestOAuthExchange:

    def test_exchange_code_sends_app_credentials(self):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json={"access_token": "short-token", "token_type": "bearer"})

        with _client(handler) as client:
            result = client.exchange_code("auth-code")

        assert result["access_token"] == "short-token"
        assert seen["path"] == "/v21.0/oauth/access_token"
        assert seen["params"]["client_id"] == "app-id"
        assert seen["params"]["client_secret"] == "app-secret"
        assert seen["params"]["code"] == "auth-code"

    def test_long_lived_exchange(self):
        def handler(request):
            assert request.url.params["grant_type"] == "fb_exchange_token"
            assert request.url.params["fb_exchange_token"] == "short-token"
            return httpx.Response(200, json={"access_token": "long-token", "expires_in": 5183944})

        with _client(handler) as client:
            assert client.exchange_long_lived_token("short-token")["access_token"] == "long-token"

    def test_missing_app_credentials(self):
        def handler(request):
            raise AssertionError("no request expected")

        with _client(handler, app_id=None) as client:
            with pytest.raises(MetaGraphError, match="not configured"):
                client.exchange_code("auth-code")


class TestErrors:

    def test_graph_error_payload(self):
        def handler(request):
            return httpx.Response(400, json={
                "error": {"message": "Error validating access token", "type": "OAuthException", "code": 190}
            })

        with _client(handler) as client:
            with pytest.raises(MetaGraphError) as exc_info:
                client.get_me("expired-token")

        assert exc_info.value.is_token_expired
        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Error validating access token"

    def test_other_error_is_not_token_expiry(self):
        def handler(request):
            return httpx.Response(400, json={"error": {"message": "Unsupported post request", "code": 100}})

        with _client(handler) as client:
            with pytest.raises(MetaGraphError) as exc_info:
                client.publish_post("page-1", "page-token", "Hello")

        assert not exc_info.value.is_token_expired

    def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with _client(handler) as client:
            with pytest.raises(MetaGraphError, match="unreachable") as exc_info:
                client.get_accounts("user-token")

        assert exc_info.value.code is None

    def test_non_json_error_body(self):
        def handler(request):
            return httpx.Response(502, text="Bad Gateway")

        with _client(handler) as client:
            with pytest.raises(MetaGraphError, match="status 502"):
                client.get_me("token")


class TestPageCalls:

    def test_accounts_returns_data_list(self):
        def handler(request):
            assert request.url.path == "/v21.0/me/accounts"
            return httpx.Response(200, json={"data": [{"id": "p1", "name": "Acme", "access_token": "pt"}]})

        with _client(handler) as client:
            assert client.get_accounts("user-token") == [{"id": "p1", "name": "Acme", "access_token": "pt"}]

    def test_posts_with_comments_are_expanded(self):
        def handler(request):
            if request.url.path == "/v21.0/page-1/posts":
                return httpx.Response(200, json={"data": [
                    {"id": "post-1", "comments": {"summary": {"total_count": 2}}},
                    {"id": "post-2", "comments": {"summary": {"total_count": 0}}},
                ]})
            assert request.url.path == "/v21.0/post-1/comments"
            return httpx.Response(200, json={"data": [{"id": "c1", "message": "Nice"}]})

        with _client(handler) as client:
            result = client.get_page_posts("page-1", "page-token")

        posts = result["posts"]
        assert posts[0]["comments_list"] == [{"id": "c1", "message": "Nice"}]
        assert "comments_list" not in posts[1]

    def test_send_message_body(self):
        def handler(request):
            body = json.loads(request.content)
            assert request.method == "POST"
            assert body == {
                "recipient": {"id": "psid-1"},
                "message": {"text": "Your order shipped"},
                "messaging_type": "RESPONSE",
            }
            return httpx.Response(200, json={"recipient_id": "psid-1", "message_id": "m1"})

        with _client(handler) as client:
            assert client.send_message("me", "page-token", "psid-1", "Your order shipped")["message_id"] == "m1"

    def test_subscribe_fields(self):
        def handler(request):
            fields = request.url.params["subscribed_fields"].split(",")
            assert "messages" in fields and "feed" in fields
            return httpx.Response(200, json={"success": True})

        with _client(handler) as client:
            assert client.subscribe_page("page-1", "page-token") == {"success": True}

    def test_debug_token_unwraps_data(self):
        def handler(request):
            assert request.url.params["access_token"] == "app-id|app-secret"
            return httpx.Response(200, json={"data": {"is_valid": True, "scopes": ["pages_messaging"]}})

        with _client(handler) as client:
            assert client.debug_token("user-token")["is_valid"] is True

    def test_delete_post_uses_delete(self):
        def handler(request):
            assert request.method == "DELETE"
            assert request.url.path == "/v21.0/post-9"
            return httpx.Response(200, json={"success": True})

        with _client(handler) as client:
            assert client.delete_post("post-9", "page-token") == {"success": True}
