"""
MedAI Backend — Application Package Initializer
=================================================

What: Marks the `app` directory as a Python package.
Why:  Enables module imports like `from app.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by pytest and uvicorn.

Architecture Note:
    ┌─────────────────────────────────────┐
    │     Routes (FastAPI routers)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │     Route Adapters                  │  ← envelope → status code + body
    ├─────────────────────────────────────┤
    │     Services (lookup, search, ...)  │  ← query semantics
    ├─────────────────────────────────────┤
    │     Loaders & Validators            │  ← JSON files → typed records
    ├─────────────────────────────────────┤
    │     Backing Store (data_root)       │  ← read-only JSON collections
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
