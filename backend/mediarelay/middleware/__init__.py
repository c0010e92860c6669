"""
MediaRelay Backend — Middleware Package
========================================

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [Security Headers] → [CORS] → Route Handler

    1. Request ID: correlation ID for every log line of the request
    2. Logging: one access line per request with status and duration
    3. Security Headers: hardening headers on every response
    4. CORS: FastAPI's CORSMiddleware (handles preflight)
"""
