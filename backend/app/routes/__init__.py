# Routes package init
"""
GeoFeatures Backend — API Routes Package
==========================================

Route Inventory:
    - features.py:  GET/POST  /api/features
                    PUT/DELETE /api/features/{id}
    - health.py:    GET /health

Routes stay thin: extract path/body, call FeatureService, return the model.
"""
