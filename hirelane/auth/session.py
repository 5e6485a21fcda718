"""
HireLane API: Session Resolution
==================================

What:  The boundary to the authentication provider. A session provider is any
       async callable `(request) -> Session | None`.
How:   The default provider reads the `user` entry of Starlette's signed
       session cookie (SessionMiddleware, registered in main.py). The sign-in
       flow that writes that entry belongs to the authentication provider and
       is not part of this service.
"""

import logging
from typing import Awaitable, Callable, Optional

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel
from starlette.requests import Request

logger = logging.getLogger(__name__)

SESSION_USER_KEY = "user"


class Session(BaseModel):
    """
    Authenticated caller.

    Accepts both snake_case and the camelCase keys the auth provider writes
    (userId, tenantId). A session without `email` is treated as anonymous.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_id: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    tenant_id: Optional[str] = None


SessionProvider = Callable[[Request], Awaitable[Optional[Session]]]


async def get_session(request: Request) -> Optional[Session]:
    """Resolve the caller's session from the signed session cookie."""
    if "session" not in request.scope:
        return None

    data = request.session.get(SESSION_USER_KEY)
    if not data:
        return None

    try:
        return Session.model_validate(data)
    except ValidationError:
        logger.warning("Discarding malformed session payload")
        return None
