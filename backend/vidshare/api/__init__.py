"""API Layer — FastAPI routes, the auth gate and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Every response body is an envelope: {statusCode, data, message, success}

Design Decisions:
    - Thin routes delegate to services; routes never touch models directly
"""
