# Services package init
"""
MRI Soundscape Backend - Services Layer
========================================

What:  Logic that is neither HTTP handling nor record storage.

Service Inventory:
    - GenerationService: simulated AI soundscape generation and download metadata

Record CRUD and the analytics summary live in soundscape_api.store.
"""
