"""
HireLane API: Middleware Package
==================================

What:  Cross-cutting concerns shared by every request.

Application chain (outermost first):
    Request → [Request ID] → [Access Log] → [Session] → [CORS] → Router

Per-route gates (auth, rate limit, input validation) are not app-wide; they
are opted into per handler through hirelane.api.wrapper, which draws on the
rate-limit store and client-address resolution defined here.
"""
