"""
MediaRelay Backend — Application Package Initializer
====================================================

What: Marks the `mediarelay` directory as a Python package.
Who:  Imported by uvicorn (`mediarelay.main:app`), pytest, and the console script.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │  Services (validate → stream → map) │  ← Upload pipeline
    ├─────────────────────────────────────┤
    │     Models & Schemas (Data)         │  ← Domain values + API contracts
    ├─────────────────────────────────────┤
    │   Remote Store (Cloudinary client)  │  ← Durable storage lives remotely
    └─────────────────────────────────────┘

    Uploaded bytes never touch local disk: they are held in memory for the
    duration of one request and streamed to the remote store.
"""

__version__ = "1.0.0"
