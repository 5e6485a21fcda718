"""
HireLane API: Provider-Specific Authorization Parameters
==========================================================

What:  Registry mapping an identity-provider name to a pure function that
       augments the standard authorization query parameters.
How:   Each augmenter receives the base parameters and returns a new dict;
       providers without an entry get the base parameters unchanged.
       Supporting a new provider means registering one function:

           @register_provider("okta")
           def _okta(params):
               return {**params, "prompt": "login"}
"""

import logging
from typing import Callable, Dict

logger = logging.getLogger(__name__)

ParamAugmenter = Callable[[Dict[str, str]], Dict[str, str]]

PROVIDER_PARAMETERS: Dict[str, ParamAugmenter] = {}


def register_provider(name: str) -> Callable[[ParamAugmenter], ParamAugmenter]:
    def decorator(augmenter: ParamAugmenter) -> ParamAugmenter:
        PROVIDER_PARAMETERS[name.lower()] = augmenter
        return augmenter

    return decorator


def apply_provider_parameters(provider: str, params: Dict[str, str]) -> Dict[str, str]:
    augmenter = PROVIDER_PARAMETERS.get(provider.lower())
    if augmenter is None:
        return dict(params)
    return augmenter(dict(params))


@register_provider("google")
def _google(params: Dict[str, str]) -> Dict[str, str]:
    # Offline access + forced consent so Google issues a refresh token every time
    return {**params, "access_type": "offline", "prompt": "consent"}


@register_provider("microsoft")
def _microsoft(params: Dict[str, str]) -> Dict[str, str]:
    return {**params, "response_mode": "query"}
