"""
Foundry — Controllers (API Routes)
===================================

What:  HTTP route handlers. Each module owns one APIRouter.

Route Inventory:
    - access.py:   POST /api/access/login | logout | signup
    - account.py:  GET/PATCH /api/me, PATCH /api/me/password
    - users.py:    /api/users CRUD                     (superuser)
    - roles.py:    /api/roles, assign/revoke           (superuser)
    - teams.py:    /api/teams CRUD and membership      (team guards)
    - health.py:   GET /health                            (public)
    - system.py:   /api/system/queue, /api/system/jobs/echo (superuser)
    - frontend.py: GET / and the SPA catch-all         (Vite-rendered shell)

Controllers stay thin: read the request, call a service, shape the
response. Authorization happens in guard dependencies (auth.guards);
business rules live in services.
"""
