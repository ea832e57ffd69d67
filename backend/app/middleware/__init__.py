# Middleware package init
"""
Travel Journal Backend — Middleware Package
=============================================

Middleware Chain:
    Request → [Request ID] → [Access Log] → [GZip] → [CORS] → Route Handler

    Request ID runs outermost so the access log line and any error envelope
    produced inside carry the same id.
"""
