"""Vidshare — video-sharing service backend.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
