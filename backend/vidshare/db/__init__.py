"""Database Infrastructure — declarative Base and dialect-aware statement helpers.

Invariants:
    - All sessions are async (AsyncSession)
    - Statements built here run unchanged on PostgreSQL (asyncpg) and SQLite (aiosqlite)
"""
