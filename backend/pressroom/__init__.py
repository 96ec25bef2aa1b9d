"""
Pressroom Backend — Application Package
=========================================

Layered like this:

    ┌─────────────────────────────────────┐
    │  Routes (API Layer)                 │  ← HTTP concerns, status codes
    ├─────────────────────────────────────┤
    │  Upload adapter                     │  ← image field → stored reference
    ├─────────────────────────────────────┤
    │  Services (article, admin)          │  ← one store call per operation
    ├─────────────────────────────────────┤
    │  Models & Schemas                   │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │  Databases (articles | admins)      │  ← two independent async engines
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
