# Middleware package init
"""
MRI Soundscape Backend - Middleware Package
============================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Rate Limit] → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Rate Limit first: reject abusive requests before any processing
    2. Request ID: generate correlation ID for logging and tracing
    3. Logging: log request details with the generated request ID
    4. CORS: applied by FastAPI's CORSMiddleware (handles preflight)

    Responses travel the chain in reverse, so the request ID header and the
    logged status/duration are both available on the way out.
"""
