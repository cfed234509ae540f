"""
Foundry — Authentication & Authorization
=========================================

    security.py      password hashing (argon2-cffi) and JWT (PyJWT)
    dependencies.py  OAuth2 bearer scheme and get_current_user
    guards.py        boolean predicates and the 403-raising guard dependencies

Kept import-free so services can import auth.security without pulling in
the FastAPI dependency graph.
"""
