"""Meta (Facebook) OAuth flow and Graph API proxy endpoints

Login and callback implement the OAuth code flow:
1. GET /auth/meta/login returns the Facebook dialog URL. Its state is a
   signed JWT holding the caller's company_id (valid 10 minutes).
2. Facebook redirects to GET /auth/meta/callback with code and state.
   The code is exchanged for a short-lived token, then a long-lived one;
   the user and the pages they manage are saved as social connections.
3. The browser is redirected to FRONTEND_ONBOARDING_URL with
   success=true or error=<reason>.

The remaining endpoints proxy Graph API calls for ADMIN users. Graph
errors are returned as 400 with Graph's message.
"""

import logging
from typing import Annotated, Iterator, Optional
from uuid import UUID

import jwt
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from ..audit.service import log_from_request
from ..auth.dependencies import CurrentAdmin
from ..auth.jwt import create_oauth_state, decode_oauth_state
from ..config import get_settings
from ..database import get_db
from ..dependencies import TenantQuery
from ..infrastructure.meta import MetaGraphClient, MetaGraphError
from ..models.company import Company
from ..models.social_connection import SocialConnection
from ..social_connections.schemas import SocialConnectionResponse
from .schemas import (
    CommentReplyRequest,
    ConnectionsResponse,
    DeletePostRequest,
    GraphResult,
    LoginUrlResponse,
    PageSubscribeRequest,
    PublishPostRequest,
    SendMessageRequest,
    TokenRefreshRequest,
)
from .service import build_login_url, onboarding_redirect_url, store_oauth_connections


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth/meta", tags=["Meta"])


def get_graph_client() -> Iterator[MetaGraphClient]:
    """Dependency yielding a Graph client for the configured app."""
    client = MetaGraphClient.from_settings()
    try:
        yield client
    finally:
        client.close()


GraphClient = Annotated[MetaGraphClient, Depends(get_graph_client)]


def _graph_failure(e: MetaGraphError, token_expiry_forbidden: bool = False) -> HTTPException:
    if token_expiry_forbidden and e.is_token_expired:
        return HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Token expired. Please re-authenticate.",
        )
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)


def _state_company_id(payload: dict) -> Optional[UUID]:
    try:
        return UUID(payload.get("company_id", ""))
    except (TypeError, ValueError):
        return None


def _redirect(**params: str) -> RedirectResponse:
    return RedirectResponse(
        onboarding_redirect_url(get_settings(), **params),
        status_code=status.HTTP_302_FOUND,
    )


@router.get("/login", response_model=LoginUrlResponse)
def login(current_user: CurrentAdmin):
    """Return the Facebook OAuth dialog URL for the caller's company.

    Raises:
        HTTPException 400: META_APP_ID or META_REDIRECT_URI not configured
    """
    settings = get_settings()
    if not settings.META_APP_ID or not settings.META_REDIRECT_URI:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="META_APP_ID and META_REDIRECT_URI must be configured",
        )

    state = create_oauth_state(current_user.company_id)
    logger.info(
        "Meta OAuth flow started",
        extra={"company_id": str(current_user.company_id), "user_id": str(current_user.id)}
    )
    return LoginUrlResponse(url=build_login_url(settings, state))


@router.get("/callback")
def callback(
    request: Request,
    client: GraphClient,
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
    error_description: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """OAuth redirect target (public; the company comes from the signed state).

    Raises:
        HTTPException 400: code or state missing
    """
    if error:
        logger.warning(f"Meta OAuth denied: {error} ({error_description})")
        return _redirect(error=error)

    if not code:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Authorization code missing")
    if not state:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="State parameter missing")

    try:
        payload = decode_oauth_state(state)
    except jwt.ExpiredSignatureError:
        return _redirect(error="state_expired")
    except jwt.InvalidTokenError:
        logger.warning("Meta OAuth callback with invalid state")
        return _redirect(error="invalid_state")

    company_id = _state_company_id(payload)
    company = db.get(Company, company_id) if company_id else None
    if company is None:
        return _redirect(error="invalid_state")

    try:
        short_lived = client.exchange_code(code)
        long_lived = client.exchange_long_lived_token(short_lived["access_token"])
        user_token = long_lived["access_token"]
        user = client.get_me(user_token)
        pages = client.get_accounts(user_token)
        store_oauth_connections(db, company.id, user, user_token, pages)
    except (MetaGraphError, KeyError, TypeError) as e:
        db.rollback()
        logger.error(f"Meta OAuth connection failed: {e!r}", extra={"company_id": str(company_id)})
        return _redirect(error="oauth_failed")

    log_from_request(
        db=db,
        request=request,
        company_id=company.id,
        action="META_ACCOUNT_CONNECTED",
        entity_type="social_connection",
        entity_id=user["id"],
        metadata={"pages": [p["id"] for p in pages]}
    )
    db.commit()

    logger.info(
        f"Meta account connected with {len(pages)} page(s)",
        extra={"company_id": str(company.id)}
    )
    return _redirect(success="true")



@router.get("/connections", response_model=ConnectionsResponse)
def get_connections(current_user: CurrentAdmin, db: Session = Depends(get_db)):
    """The company's social connections with masked tokens."""
    connections = (
        TenantQuery.scoped_query(db, SocialConnection, current_user.company_id)
        .order_by(SocialConnection.created_at.desc())
        .all()
    )
    return ConnectionsResponse(
        total=len(connections),
        connections=[SocialConnectionResponse.model_validate(c) for c in connections],
    )


# Graph proxies

@router.get("/pages", response_model=GraphResult)
def get_pages(current_user: CurrentAdmin, client: GraphClient, user_token: str = Query(..., min_length=1)):
    """Pages managed by the token's user, with their page tokens.

    Raises:
        HTTPException 403: User token expired (Graph error 190)
    """
    try:
        pages = client.get_accounts(user_token)
    except MetaGraphError as e:
        raise _graph_failure(e, token_expiry_forbidden=True)
    return GraphResult(data={"pages": pages, "total": len(pages)})


@router.post("/token/refresh", response_model=GraphResult)
def refresh_token(data: TokenRefreshRequest, current_user: CurrentAdmin, client: GraphClient):
    """Exchange a user token for a fresh long-lived token."""
    try:
        result = client.exchange_long_lived_token(data.user_token)
    except MetaGraphError as e:
        raise _graph_failure(e)
    return GraphResult(data={
        "access_token": result.get("access_token"),
        "expires_in": result.get("expires_in"),
    })


@router.get("/page/posts", response_model=GraphResult)
def get_page_posts(
    current_user: CurrentAdmin,
    client: GraphClient,
    page_id: str = Query(..., min_length=1),
    page_token: str = Query(..., min_length=1),
    limit: int = Query(25, ge=1, le=100),
):
    try:
        result = client.get_page_posts(page_id, page_token, limit=limit)
    except MetaGraphError as e:
        raise _graph_failure(e)
    return GraphResult(data=result)


@router.post("/page/post", response_model=GraphResult)
def publish_page_post(data: PublishPostRequest, current_user: CurrentAdmin, client: GraphClient):
    try:
        result = client.publish_post(
            data.page_id, data.page_token, data.message, link=data.link, published=data.published
        )
    except MetaGraphError as e:
        raise _graph_failure(e)
    logger.info(
        f"Published post on page {data.page_id}",
        extra={"company_id": str(current_user.company_id), "user_id": str(current_user.id)}
    )
    return GraphResult(data=result)


@router.post("/message/send", response_model=GraphResult)
def send_page_message(data: SendMessageRequest, current_user: CurrentAdmin, client: GraphClient):
    """Send a Messenger text from a page to a user (messaging_type RESPONSE)."""
    try:
        result = client.send_message(data.page_id, data.page_token, data.recipient_id, data.text)
    except MetaGraphError as e:
        raise _graph_failure(e)
    return GraphResult(data=result)


@router.get("/page/conversations", response_model=GraphResult)
def get_page_conversations(
    current_user: CurrentAdmin,
    client: GraphClient,
    page_id: str = Query(..., min_length=1),
    page_token: str = Query(..., min_length=1),
):
    try:
        result = client.get_page_conversations(page_id, page_token)
    except MetaGraphError as e:
        raise _graph_failure(e)
    return GraphResult(data=result)


@router.get("/conversation/messages", response_model=GraphResult)
def get_conversation_messages(
    current_user: CurrentAdmin,
    client: GraphClient,
    conversation_id: str = Query(..., min_length=1),
    page_token: str = Query(..., min_length=1),
):
    try:
        result = client.get_conversation_messages(conversation_id, page_token)
    except MetaGraphError as e:
        raise _graph_failure(e)
    return GraphResult(data=result)


@router.get("/debug/token", response_model=GraphResult)
def debug_token(current_user: CurrentAdmin, client: GraphClient, token: str = Query(..., min_length=1)):
    """Graph's view of a token: validity, scopes and expiry."""
    try:
        result = client.debug_token(token)
    except MetaGraphError as e:
        raise _graph_failure(e)
    return GraphResult(data=result)


@router.post("/page/subscribe", response_model=GraphResult)
def subscribe_page(data: PageSubscribeRequest, current_user: CurrentAdmin, client: GraphClient):
    """Subscribe the app to a page's messaging and feed webhooks."""
    try:
        result = client.subscribe_page(data.page_id, data.page_token)
    except MetaGraphError as e:
        raise _graph_failure(e)
    return GraphResult(data=result)


@router.get("/user/info", response_model=GraphResult)
def get_user_info(
    current_user: CurrentAdmin,
    client: GraphClient,
    user_access_token: str = Query(..., min_length=1),
):
    try:
        result = client.get_me(user_access_token)
    except MetaGraphError as e:
        raise _graph_failure(e)
    return GraphResult(data=result)


@router.post("/page/post/delete", response_model=GraphResult)
def delete_page_post(data: DeletePostRequest, current_user: CurrentAdmin, client: GraphClient):
    try:
        result = client.delete_post(data.post_id, data.page_token)
    except MetaGraphError as e:
        raise _graph_failure(e)
    return GraphResult(data=result)


@router.post("/page/comment/reply", response_model=GraphResult)
def reply_to_comment(data: CommentReplyRequest, current_user: CurrentAdmin, client: GraphClient):
    try:
        result = client.reply_to_comment(data.comment_id, data.page_token, data.message)
    except MetaGraphError as e:
        raise _graph_failure(e)
    return GraphResult(data=result)


@router.get("/page/insights", response_model=GraphResult)
def get_page_insights(
    current_user: CurrentAdmin,
    client: GraphClient,
    page_id: str = Query(..., min_length=1),
    page_token: str = Query(..., min_length=1),
    metric: Optional[str] = None,
):
    """Daily page metrics (DEFAULT_INSIGHT_METRICS unless ``metric`` is given).

    Raises:
        HTTPException 403: Page token expired (Graph error 190)
    """
    try:
        result = client.get_page_insights(page_id, page_token, metric=metric)
    except MetaGraphError as e:
        raise _graph_failure(e, token_expiry_forbidden=True)
    return GraphResult(data=result)


@router.get("/verify/setup", response_model=GraphResult)
def verify_setup(current_user: CurrentAdmin):
    """Which Meta settings are configured. Secret values are never returned."""
    settings = get_settings()
    return GraphResult(data={
        "config": {
            "app_id": "set" if settings.META_APP_ID else "missing",
            "app_secret": "set" if settings.META_APP_SECRET else "missing",
            "redirect_uri": settings.META_REDIRECT_URI or "missing",
            "webhook_token": "set" if settings.META_WEB_HOOK_VERIFY_TOKEN else "missing",
            "graph_version": settings.META_GRAPH_VERSION,
        },
        "endpoints": {
            "login": "/api/v1/auth/meta/login",
            "callback": "/api/v1/auth/meta/callback",
            "pages": "/api/v1/auth/meta/pages",
            "posts": "/api/v1/auth/meta/page/posts",
            "create_post": "/api/v1/auth/meta/page/post",
            "send_message": "/api/v1/auth/meta/message/send",
            "conversations": "/api/v1/auth/meta/page/conversations",
        },
    })
