"""Core — pure domain logic: error taxonomy, token signing, ownership rules.

Invariants:
    - Core NEVER imports from services/, api/ or infrastructure/
    - No module here performs IO
"""
