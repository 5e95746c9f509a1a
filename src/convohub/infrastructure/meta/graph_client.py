"""
Meta Graph Client - Synchronous client for the Facebook Graph API.

Wraps the OAuth token exchange (code -> short-lived -> long-lived token),
user/page lookups and the page management calls proxied by the
/auth/meta endpoints.

Every call is timed and counted in Prometheus; Graph error payloads
({"error": {"message", "code", ...}}) are raised as MetaGraphError.
"""

import logging
import time
from typing import Any, Optional

import httpx

from ...config import Settings, get_settings
from ...observability.metrics import meta_graph_calls_total, meta_graph_latency_seconds


logger = logging.getLogger(__name__)

GRAPH_BASE_URL = "https://graph.facebook.com"

# Graph error code for an expired or invalidated access token
TOKEN_EXPIRED_CODE = 190

USER_FIELDS = "id,name,email,picture"
PAGE_FIELDS = "id,name,access_token"
POST_FIELDS = "id,message,full_picture,created_time,permalink_url,likes.summary(true),comments.summary(true),shares"
COMMENT_FIELDS = "id,from{name,id},message,created_time,like_count"
CONVERSATION_FIELDS = "id,senders,updated_time,message_count,unread_count"
MESSAGE_FIELDS = "id,message,from,created_time,attachments"

WEBHOOK_FIELDS = [
    "messages",
    "messaging_postbacks",
    "messaging_optins",
    "message_deliveries",
    "message_reads",
    "feed",
    "mention",
]

DEFAULT_INSIGHT_METRICS = [
    "page_impressions",
    "page_impressions_unique",
    "page_engaged_users",
    "page_post_engagements",
    "page_fans",
    "page_fan_adds",
    "page_fan_removes",
]


class MetaGraphError(Exception):
    """Raised when the Graph API returns an error or cannot be reached.

    Attributes:
        message: Graph error message (or transport error text)
        code: Graph error code (e.g. 190 for expired tokens), None for transport errors
        status_code: HTTP status returned by Graph, None for transport errors
    """

    def __init__(self, message: str, code: Optional[int] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code

    @property
    def is_token_expired(self) -> bool:
        return self.code == TOKEN_EXPIRED_CODE


class MetaGraphClient:
    """Facebook Graph API client bound to one app configuration.

    Args:
        app_id: Facebook app ID
        app_secret: Facebook app secret
        redirect_uri: OAuth redirect URI registered with the app
        graph_version: Graph API version (e.g. "v21.0")
        timeout: Per-request timeout in seconds
        transport: Optional httpx transport (tests pass httpx.MockTransport)
    """

    def __init__(
        self,
        app_id: Optional[str],
        app_secret: Optional[str],
        redirect_uri: Optional[str] = None,
        graph_version: str = "v21.0",
        timeout: float = 15.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.app_id = app_id
        self.app_secret = app_secret
        self.redirect_uri = redirect_uri
        self.base_url = f"{GRAPH_BASE_URL}/{graph_version}"
        self._client = httpx.Client(base_url=self.base_url, timeout=timeout, transport=transport)

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> "MetaGraphClient":
        settings = settings or get_settings()
        return cls(
            app_id=settings.META_APP_ID,
            app_secret=settings.META_APP_SECRET,
            redirect_uri=settings.META_REDIRECT_URI,
            graph_version=settings.META_GRAPH_VERSION,
            timeout=settings.META_HTTP_TIMEOUT_SECONDS,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "MetaGraphClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _require_app_credentials(self) -> None:
        if not self.app_id or not self.app_secret:
            raise MetaGraphError("META credentials not configured")

    def _request(
        self,
        operation: str,
        method: str,
        path: str,
        params: Optional[dict] = None,
        json: Optional[dict] = None,
    ) -> dict:
        start = time.perf_counter()
        try:
            response = self._client.request(method, path, params=params, json=json)
        except httpx.HTTPError as e:
            meta_graph_calls_total.labels(operation=operation, status="error").inc()
            logger.error(f"Meta Graph {operation} failed: {e}")
            raise MetaGraphError(f"Graph API unreachable: {e}")
        finally:
            meta_graph_latency_seconds.labels(operation=operation).observe(time.perf_counter() - start)

        try:
            payload = response.json()
        except ValueError:
            payload = {}

        if response.is_error or (isinstance(payload, dict) and "error" in payload):
            error = payload.get("error", {}) if isinstance(payload, dict) else {}
            meta_graph_calls_total.labels(operation=operation, status="error").inc()
            logger.warning(
                f"Meta Graph {operation} returned error: status={response.status_code}, "
                f"code={error.get('code')}, message={error.get('message')}"
            )
            raise MetaGraphError(
                error.get("message") or f"Graph API request failed with status {response.status_code}",
                code=error.get("code"),
                status_code=response.status_code,
            )

        meta_graph_calls_total.labels(operation=operation, status="success").inc()
        return payload if isinstance(payload, dict) else {"data": payload}

    # OAuth

    def exchange_code(self, code: str) -> dict:
        """Exchange an OAuth code for a short-lived user token."""
        self._require_app_credentials()
        return self._request("exchange_code", "GET", "/oauth/access_token", params={
            "client_id": self.app_id,
            "client_secret": self.app_secret,
            "redirect_uri": self.redirect_uri,
            "code": code,
        })

    def exchange_long_lived_token(self, token: str) -> dict:
        """Exchange a user token for a long-lived (about 60 days) token."""
        self._require_app_credentials()
        return self._request("exchange_long_lived", "GET", "/oauth/access_token", params={
            "grant_type": "fb_exchange_token",
            "client_id": self.app_id,
            "client_secret": self.app_secret,
            "fb_exchange_token": token,
        })

    def debug_token(self, token: str) -> dict:
        self._require_app_credentials()
        payload = self._request("debug_token", "GET", "/debug_token", params={
            "input_token": token,
            "access_token": f"{self.app_id}|{self.app_secret}",
        })
        return payload.get("data", {})

    # Users and pages

    def get_me(self, user_token: str) -> dict:
        return self._request("get_me", "GET", "/me", params={
            "access_token": user_token,
            "fields": USER_FIELDS,
        })

    def get_accounts(self, user_token: str) -> list[dict]:
        payload = self._request("get_accounts", "GET", "/me/accounts", params={
            "access_token": user_token,
            "fields": PAGE_FIELDS,
        })
        return payload.get("data") or []

    def get_page_posts(self, page_id: str, page_token: str, limit: int = 25) -> dict:
        """Page posts, with up to 10 comments attached to posts that have any."""
        payload = self._request("get_page_posts", "GET", f"/{page_id}/posts", params={
            "fields": POST_FIELDS,
            "access_token": page_token,
            "limit": limit,
        })
        posts = payload.get("data") or []
        for post in posts:
            total = post.get("comments", {}).get("summary", {}).get("total_count", 0)
            if total > 0:
                comments = self._request("get_post_comments", "GET", f"/{post['id']}/comments", params={
                    "fields": COMMENT_FIELDS,
                    "access_token": page_token,
                    "limit": 10,
                })
                post["comments_list"] = comments.get("data") or []
        return {"posts": posts, "paging": payload.get("paging")}

    def publish_post(self, page_id: str, page_token: str, message: str,
                     link: Optional[str] = None, published: bool = True) -> dict:
        params: dict[str, Any] = {
            "message": message,
            "access_token": page_token,
            "published": "true" if published else "false",
        }
        if link:
            params["link"] = link
        return self._request("publish_post", "POST", f"/{page_id}/feed", params=params)

    def delete_post(self, post_id: str, page_token: str) -> dict:
        return self._request("delete_post", "DELETE", f"/{post_id}", params={"access_token": page_token})

    def reply_to_comment(self, comment_id: str, page_token: str, message: str) -> dict:
        return self._request("reply_to_comment", "POST", f"/{comment_id}/comments", params={
            "message": message,
            "access_token": page_token,
        })

    def send_message(self, page_id: str, page_token: str, recipient_id: str, text: str) -> dict:
        return self._request(
            "send_message",
            "POST",
            f"/{page_id}/messages",
            params={"access_token": page_token},
            json={
                "recipient": {"id": recipient_id},
                "message": {"text": text},
                "messaging_type": "RESPONSE",
            },
        )

    def get_page_conversations(self, page_id: str, page_token: str) -> dict:
        return self._request("get_page_conversations", "GET", f"/{page_id}/conversations", params={
            "access_token": page_token,
            "fields": CONVERSATION_FIELDS,
            "limit": 50,
        })

    def get_conversation_messages(self, conversation_id: str, page_token: str) -> dict:
        return self._request("get_conversation_messages", "GET", f"/{conversation_id}/messages", params={
            "access_token": page_token,
            "fields": MESSAGE_FIELDS,
            "limit": 100,
        })

    def subscribe_page(self, page_id: str, page_token: str) -> dict:
        return self._request("subscribe_page", "POST", f"/{page_id}/subscribed_apps", params={
            "subscribed_fields": ",".join(WEBHOOK_FIELDS),
            "access_token": page_token,
        })

    def get_page_insights(self, page_id: str, page_token: str, metric: Optional[str] = None) -> list[dict]:
        payload = self._request("get_page_insights", "GET", f"/{page_id}/insights", params={
            "metric": metric or ",".join(DEFAULT_INSIGHT_METRICS),
            "access_token": page_token,
            "period": "day",
        })
        return payload.get("data") or []
