# Services package init
"""
HireLane API: Services Layer
==============================

Service Inventory:
    - OAuthService:         provider config lookup, state token, authorization URL, state cookie
    - oauth_providers:      per-provider query parameter overrides (google, microsoft)
    - QuestionBankService:  company-scoped question bank CRUD

Services take the request's AsyncSession as an argument and hold no
per-request state, so each is a module-level singleton.
"""
