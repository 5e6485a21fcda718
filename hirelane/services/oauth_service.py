"""
HireLane API: OAuth Authorization Service
===========================================

What:  Starts an OAuth authorization-code flow for a tenant's identity provider.
How:   1. Load the tenant's active configuration for the provider
       2. Generate a 32-byte random state token (hex, 64 chars)
       3. Build the provider URL with client_id, redirect_uri, scope,
          response_type=code and state="{token}:{tenant_id}"
       4. Apply provider-specific parameters (oauth_providers registry)
       The route then redirects there and stores the raw token in the
       `oauth_state_{tenant_id}` cookie.
Who:   GET /auth/sso/oauth/authorize/{provider}/{tenant_id}

State verification:
    The callback (handled by the authentication provider) compares the
    token portion of the returned `state` with the tenant's cookie. Both
    values come from the callback request itself, so no server-side state
    store is involved.
"""

import logging
import secrets
from typing import Dict, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hirelane.config import Environment, settings
from hirelane.exceptions import NotFoundError
from hirelane.models.sso_configuration import SSOConfiguration
from hirelane.schemas.sso import AuthorizationRequest, OAuthProviderConfig
from hirelane.services.oauth_providers import apply_provider_parameters

logger = logging.getLogger(__name__)

STATE_TOKEN_BYTES = 32
SIGNIN_ERROR_PATH = "/auth/signin"


def generate_state_token() -> str:
    return secrets.token_hex(STATE_TOKEN_BYTES)


def state_cookie_name(tenant_id: str) -> str:
    return f"oauth_state_{tenant_id}"


def set_query_params(url: str, params: Dict[str, str]) -> str:
    """Return `url` with `params` set, keeping any query parameters it already had."""
    parts = urlsplit(url)
    query = dict(parse_qsl(parts.query, keep_blank_values=True))
    query.update(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(query), parts.fragment))


class OAuthService:
    """
    Args:
        environment:  Runtime mode; production state cookies are Secure
        app_url:      Base URL of the web app, for the sign-in error redirect
        state_ttl:    Lifetime of the state cookie in seconds
    """

    def __init__(
        self,
        environment: Environment,
        app_url: str,
        state_ttl: int = 600,
    ):
        self.environment = environment
        self.app_url = app_url.rstrip("/")
        self.state_ttl = state_ttl

    async def get_provider_config(
        self,
        db: AsyncSession,
        tenant_id: str,
        provider: str,
    ) -> OAuthProviderConfig:
        """
        Raises:
            NotFoundError: no active configuration for (tenant_id, provider)
            pydantic.ValidationError: the stored configuration is malformed
        """
        result = await db.execute(
            select(SSOConfiguration)
            .where(
                SSOConfiguration.company_id == tenant_id,
                SSOConfiguration.provider == provider,
                SSOConfiguration.is_active.is_(True),
            )
            .limit(1)
        )
        row: Optional[SSOConfiguration] = result.scalar_one_or_none()
        if row is None:
            raise NotFoundError(
                resource="sso_configuration",
                message="OAuth configuration not found or inactive",
                context={"tenant_id": tenant_id, "provider": provider},
            )
        return OAuthProviderConfig.model_validate(row.configuration)

    def build_authorization_url(
        self,
        config: OAuthProviderConfig,
        provider: str,
        tenant_id: str,
        state_token: str,
    ) -> str:
        params = {
            "client_id": config.client_id,
            "redirect_uri": config.redirect_uri,
            "scope": " ".join(config.scopes),
            "response_type": "code",
            "state": f"{state_token}:{tenant_id}",
        }
        params = apply_provider_parameters(provider, params)
        return set_query_params(str(config.auth_url), params)

    async def begin_authorization(
        self,
        db: AsyncSession,
        tenant_id: str,
        provider: str,
    ) -> AuthorizationRequest:
        config = await self.get_provider_config(db, tenant_id, provider)
        state_token = generate_state_token()
        url = self.build_authorization_url(config, provider, tenant_id, state_token)
        logger.info("OAuth authorization started: tenant=%s provider=%s", tenant_id, provider)
        return AuthorizationRequest(
            url=url,
            state_token=state_token,
            tenant_id=tenant_id,
            provider=provider,
        )

    def state_cookie(self, authorization: AuthorizationRequest) -> Dict[str, object]:
        """Keyword arguments for Response.set_cookie() binding the state to the tenant."""
        return {
            "key": state_cookie_name(authorization.tenant_id),
            "value": authorization.state_token,
            "max_age": self.state_ttl,
            "path": "/",
            "httponly": True,
            "samesite": "lax",
            "secure": self.environment == Environment.PRODUCTION,
        }

    def error_redirect_url(self) -> str:
        return f"{self.app_url}{SIGNIN_ERROR_PATH}?{urlencode({'error': 'oauth_error'})}"


oauth_service = OAuthService(
    environment=settings.environment,
    app_url=settings.app_url,
    state_ttl=settings.oauth_state_ttl,
)
