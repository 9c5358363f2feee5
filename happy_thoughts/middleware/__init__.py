# Middleware package init
"""
Happy Thoughts API — Middleware Package
=========================================

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID first, so the access log line carries it
    2. Logging measures the full handler duration and sees the final status

Authentication is not middleware: it is a FastAPI dependency
(happy_thoughts.dependencies.auth) attached only to the routes that need it.
"""
