"""
Happy Thoughts API — Application Package
==========================================

A small social API: users register and receive a bearer token, post short
"thoughts" filed under tags, like thoughts, and browse them by page, tag,
popularity, recency or author.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │  Dependencies (auth, services)      │  ← per-request wiring
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← filters, ownership, errors
    ├─────────────────────────────────────┤
    │   Repositories (Store Interface)    │  ← find / count / insert / ...
    ├─────────────────────────────────────┤
    │  Models & Schemas (Data)            │  ← SQLAlchemy ORM + Pydantic
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
