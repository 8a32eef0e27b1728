"""
MRI Soundscape Backend - Application Package Initializer
=========================================================

What:  Marks the `soundscape_api` directory as a Python package.
Who:   Used by uvicorn (`uvicorn soundscape_api.main:app`) and by pytest.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (generation stub)        │
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← Pydantic records and payloads
    ├─────────────────────────────────────┤
    │      Store (in-memory persistence)  │  ← MemoryStore on app.state
    └─────────────────────────────────────┘

    Routes turn HTTP requests into one Store call and serialize the result.
    The Store owns every record for the lifetime of the process.
"""

__version__ = "1.0.0"
