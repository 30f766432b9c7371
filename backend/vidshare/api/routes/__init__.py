"""Route Modules — one file per resource.

Invariants:
    - Each module defines its own APIRouter with prefix and tags
    - Routes never contain business logic (delegate to services/)
    - Authenticated routes declare require_identity before get_db

Design Decisions:
    - Explicit registration in main.py over auto-discovery
"""
