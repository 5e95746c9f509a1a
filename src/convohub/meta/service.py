"""Meta OAuth helpers

Builds the Facebook login dialog URL and stores the tokens obtained in the
callback as social connections of the company that started the flow.
"""

import logging
from typing import Iterable, List
from urllib.parse import urlencode
from uuid import UUID

from sqlalchemy.orm import Session

from ..config import Settings
from ..models.social_connection import SocialConnection


logger = logging.getLogger(__name__)

OAUTH_SCOPES = [
    "pages_show_list",
    "pages_read_engagement",
    "pages_manage_posts",
    "pages_manage_engagement",
    "pages_messaging",
    "pages_manage_metadata",
    "public_profile",
    "email",
]

USER_PLATFORM_NAME = "Facebook"
USER_PLATFORM_TYPE = "user"
PAGE_PLATFORM_TYPE = "page"


def build_login_url(settings: Settings, state: str) -> str:
    """Facebook OAuth dialog URL for the configured app.

    Example:
        https://www.facebook.com/v24.0/dialog/oauth?client_id=123&redirect_uri=...
        &response_type=code&scope=pages_show_list,...&state=<jwt>&auth_type=rerequest
    """
    query = urlencode({
        "client_id": settings.META_APP_ID,
        "redirect_uri": settings.META_REDIRECT_URI,
        "response_type": "code",
        "scope": ",".join(OAUTH_SCOPES),
        "state": state,
        "auth_type": "rerequest",
    })
    return f"https://www.facebook.com/{settings.META_DIALOG_VERSION}/dialog/oauth?{query}"


def onboarding_redirect_url(settings: Settings, **params: str) -> str:
    return f"{settings.FRONTEND_ONBOARDING_URL}?{urlencode(params)}"


def upsert_connection(
    db: Session,
    company_id: UUID,
    platform_id: str,
    platform_name: str,
    platform_type: str,
    token: str,
) -> SocialConnection:
    """Insert or refresh the connection keyed by (platform id, company)."""
    connection = db.get(SocialConnection, (platform_id, company_id))
    if connection:
        connection.platform_token = token
        connection.platform_name = platform_name
        return connection

    connection = SocialConnection(
        id=platform_id,
        company_id=company_id,
        platform_name=platform_name,
        platform_type=platform_type,
        platform_token=token,
    )
    db.add(connection)
    return connection


def store_oauth_connections(
    db: Session,
    company_id: UUID,
    user: dict,
    user_token: str,
    pages: Iterable[dict],
) -> List[SocialConnection]:
    """Save the Facebook user connection and one connection per managed page."""
    connections = [
        upsert_connection(db, company_id, user["id"], USER_PLATFORM_NAME, USER_PLATFORM_TYPE, user_token)
    ]
    for page in pages:
        connections.append(
            upsert_connection(
                db, company_id, page["id"], page.get("name") or page["id"],
                PAGE_PLATFORM_TYPE, page["access_token"],
            )
        )

    db.flush()
    if len(connections) == 1:
        logger.warning(
            "Meta account connected without pages",
            extra={"company_id": str(company_id)}
        )
    return connections
