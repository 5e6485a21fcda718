# Routes package init
"""
HireLane API: Routes Package
==============================

Route Inventory:
    - sso.py:             GET  /auth/sso/oauth/authorize/{provider}/{tenant_id}
    - question_banks.py:  GET/POST        /api/content/question-banks
                          GET/PUT/DELETE  /api/content/question-banks/{bank_id}
    - health.py:          GET  /health

Routes stay thin: they pull values out of the request, call a service and
shape the response. The question bank handlers run behind the request
middleware wrapper (hirelane.api); the SSO route does its own redirect-based
error handling.
"""
