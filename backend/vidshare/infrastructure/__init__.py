"""Infrastructure Layer — database engine lifecycle and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/ or api/
    - All driver errors mapped to the core error taxonomy before leaving this layer
"""
