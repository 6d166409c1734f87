"""
GeoFeatures Backend — Application Package Initializer
=====================================================

Layers:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │       Services (Repository Ops)     │  ← id parsing, one DB call each
    ├─────────────────────────────────────┤
    │           Schemas (Data)            │  ← Pydantic request/response models
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← MongoDB handle, opened once
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
