# Routes package init
"""
iNote Backend - API Routes Package
==================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - notes.py:   {API_PREFIX}/notes  (CRUD, title/owner/date-range lookups)
    - users.py:   {API_PREFIX}/users  (CRUD, username/email/role/date lookups)
    - health.py:  GET /health         (service health check)

Routes stay thin: extract request data, call a service, pick the status
code. Business rules live in the services.
"""
