"""
HireLane API: SSO Schemas
===========================

What:  Typed view of the JSON stored in sso_configurations.configuration.
Why:   The column is free-form JSONB; parsing it here turns a malformed row
       into a pydantic ValidationError at lookup time instead of a KeyError
       halfway through URL construction.
"""

from dataclasses import dataclass
from typing import List

from pydantic import AnyHttpUrl, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class OAuthProviderConfig(BaseModel):
    """
    Example stored value:
        {
            "authUrl": "https://accounts.google.com/o/oauth2/v2/auth",
            "clientId": "123.apps.googleusercontent.com",
            "redirectUri": "https://app.example.com/api/auth/sso/oauth/callback/google",
            "scopes": ["openid", "email", "profile"]
        }
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    auth_url: AnyHttpUrl = Field(description="Provider authorization endpoint")
    client_id: str = Field(min_length=1)
    redirect_uri: str = Field(min_length=1)
    scopes: List[str] = Field(default_factory=list)


@dataclass(frozen=True)
class AuthorizationRequest:
    """Everything the authorize route needs to build its redirect."""

    url: str
    state_token: str
    tenant_id: str
    provider: str
