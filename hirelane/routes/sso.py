"""
HireLane API: SSO Authorization Route
=======================================

What:  GET /auth/sso/oauth/authorize/{provider}/{tenant_id}
How:   Delegates URL and state construction to OAuthService, then answers
       with a 302 to the provider and the tenant's state cookie.
Who:   Followed by the browser when a user clicks "Sign in with <provider>"
       on a company's login page.

Error behavior:
    - No active configuration → 404 JSON envelope, no cookie
    - Anything else           → 302 to {APP_URL}/auth/signin?error=oauth_error
    The caller is a redirect-following browser, so unexpected failures end
    on the sign-in page instead of a raw 500.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.responses import Response

from hirelane.database import get_db_session
from hirelane.exceptions import NotFoundError
from hirelane.schemas.common import ErrorResponse
from hirelane.services.oauth_service import oauth_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["SSO"])


@router.get(
    "/auth/sso/oauth/authorize/{provider}/{tenant_id}",
    status_code=302,
    response_class=RedirectResponse,
    responses={
        302: {"description": "Redirect to the identity provider (or to sign-in on error)"},
        404: {"description": "No active configuration for this provider", "model": ErrorResponse},
    },
    summary="Start OAuth sign-in for a company's identity provider",
)
async def authorize(
    provider: str,
    tenant_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    try:
        authorization = await oauth_service.begin_authorization(
            db, tenant_id=tenant_id, provider=provider
        )
        response = RedirectResponse(authorization.url, status_code=302)
        # CookieError when tenant_id is not a legal cookie-name token
        response.set_cookie(**oauth_service.state_cookie(authorization))
    except NotFoundError:
        raise
    except Exception:
        logger.error(
            "OAuth authorization failed: tenant=%s provider=%s",
            tenant_id,
            provider,
            exc_info=True,
        )
        return RedirectResponse(oauth_service.error_redirect_url(), status_code=302)

    return response
