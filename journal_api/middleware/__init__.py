"""
Journal API: Middleware Package
===============================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (outermost first):
    Request → [Request ID] → [Access Log] → [CORS] → Route Handler

    Request ID runs first so the access log line and every log record
    emitted while handling the request share one correlation id.
"""
