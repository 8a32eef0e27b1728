# Routes package init
"""
MRI Soundscape Backend - API Routes Package
============================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - sessions.py:    POST /api/sessions
                      GET  /api/sessions/{id}
                      GET  /api/sessions/{id}/analytics
    - users.py:       POST /api/users
                      GET  /api/users/{userId}
                      GET  /api/users/{userId}/sessions
    - preferences.py: GET  /api/users/{userId}/preferences
                      POST /api/users/{userId}/preferences
    - analytics.py:   POST /api/analytics
                      GET  /api/analytics/summary
    - soundscapes.py: POST /api/soundscapes/generate
                      GET  /api/soundscapes/download/{type}
    - health.py:      GET  /api/health

Routes stay thin: pull the MemoryStore from the request (get_store), call
one Store operation, turn a None result into NotFoundError.
"""
