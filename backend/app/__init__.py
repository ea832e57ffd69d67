"""
Travel Journal Backend — Application Package Initializer
==========================================================

What: Marks the `app` directory as a Python package.
Who:  Imported by uvicorn (app.main:app), Alembic, and pytest.

Architecture Note:
    ┌─────────────────────────────────────┐
    │   Routes + Dependencies (Gateway)   │  ← HTTP, bearer token, envelopes
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Ownership, validation, search
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │   Database + Uploads (Persistence)  │  ← Async sessions, image files
    └─────────────────────────────────────┘

    Routes never touch the database directly; the authenticated user id is
    resolved once in dependencies.py and passed down explicitly.
"""

__version__ = "1.0.0"
