"""
HireLane API: Client Address Resolution
=========================================

What:  Determines the originating client address of a request.
How:   Checks proxy headers from the most to the least trusted layer:
       X-Forwarded-For (first hop), X-Real-IP, then Cloudflare's
       CF-Connecting-IP. Falls back to the literal "unknown".

The socket peer (`request.client`) is deliberately not consulted: behind the
reverse proxy it is always the proxy itself, and keying on it would merge
every client into one rate-limit bucket.
"""

from typing import Mapping

UNKNOWN_CLIENT = "unknown"

CLIENT_ADDRESS_HEADERS = ("x-forwarded-for", "x-real-ip", "cf-connecting-ip")


def resolve_client_address(headers: Mapping[str, str]) -> str:
    for header in CLIENT_ADDRESS_HEADERS:
        value = headers.get(header)
        if not value:
            continue
        # X-Forwarded-For is "client, proxy1, proxy2"
        address = value.split(",")[0].strip()
        if address:
            return address
    return UNKNOWN_CLIENT
