# Middleware package init
"""
iNote Backend - Middleware Package
==================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (outermost first):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    The request ID is set before the logging middleware reads it, and the
    logging middleware sees the final status code and duration.
"""
