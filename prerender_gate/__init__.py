"""
Prerender Gate
==============

What: Starlette/FastAPI middleware that answers search-engine and link-preview
      crawlers with pre-rendered HTML snapshots.
How:  Each request is classified; eligible ones are served from a pluggable
      snapshot cache or fetched from an external rendering service.

Layers:
    ┌─────────────────────────────────────┐
    │   Middleware (Starlette adapter)    │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (snapshot pipeline)      │  ← classify, cache, retrieve
    ├─────────────────────────────────────┤
    │   Schemas & Config (data)           │  ← Pydantic models and settings
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
