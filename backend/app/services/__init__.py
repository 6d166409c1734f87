# Services package init
"""
GeoFeatures Backend — Services Layer
======================================

Service Inventory:
    - FeatureService: list/create/update/delete over the features collection
"""
