"""
Foundry — Application Package
==============================

Fullstack web application template: a FastAPI backend that serves a JSON API
and the Vite-built React frontend, with SAQ background jobs on Redis.

Architecture:

    ┌─────────────────────────────────────┐
    │   Routes (controllers) + Guards     │  ← HTTP concerns, authorization
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← accounts, roles, teams
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic DTOs
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Side processes share the same services:
    - worker/  SAQ worker (`foundry worker`)
    - cli.py   management commands (`foundry create-user`, `foundry db upgrade`, ...)
"""

__version__ = "1.0.0"
