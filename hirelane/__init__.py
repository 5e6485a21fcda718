"""
HireLane API: Application Package
===================================

Layered the usual way:

    ┌─────────────────────────────────────┐
    │     Routes + request wrapper        │  ← HTTP concerns, gates, envelopes
    ├─────────────────────────────────────┤
    │         Services                    │  ← OAuth initiation, question banks
    ├─────────────────────────────────────┤
    │       Models & Schemas              │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database                     │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
