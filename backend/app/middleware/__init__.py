# Middleware package init
"""
MedAI Backend — Middleware Package
====================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Rate Limit] → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Rate Limit first: reject abusive clients before any file is read
    2. Request ID: correlation id for logs and error bodies
    3. Logging: access line with status and duration
"""
