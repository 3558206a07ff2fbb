"""
iNote Backend - Application Package Initializer
===============================================

What: Marks the `inote` directory as a Python package.
Who:  Imported by uvicorn, Alembic, and pytest.

Architecture Note:
    The backend is split into four layers:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (cache + result policy)  │  ← NotFound results, write-through cache
    ├─────────────────────────────────────┤
    │     Repositories (Persistence)      │  ← SQLAlchemy queries, no commits
    ├─────────────────────────────────────┤
    │     Models & Schemas (Data)         │  ← SQLAlchemy ORM + Pydantic
    └─────────────────────────────────────┘

    Routes receive the request-scoped session and the application-scoped
    services through FastAPI dependencies; services receive their cache
    region through the constructor.
"""

__version__ = "1.0.0"
