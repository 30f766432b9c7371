"""Dialect-aware INSERT ... ON CONFLICT DO NOTHING.

Membership rows (likes, saves, subscriptions, history) are sets: inserting a
member that is already present must be a no-op, not an IntegrityError that
aborts the surrounding transaction.
"""

from typing import Any

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


async def insert_ignore(
    db: AsyncSession,
    model: type,
    values: dict[str, Any],
    conflict_columns: list[str],
) -> bool:
    """Insert one row unless it conflicts. Returns True if a row was written."""
    dialect = db.get_bind().dialect.name
    try:
        insert = _INSERTS[dialect]
    except KeyError:
        raise NotImplementedError(f"insert_ignore does not support {dialect}")
    stmt = insert(model.__table__).values(**values).on_conflict_do_nothing(
        index_elements=conflict_columns,
    )
    result = await db.execute(stmt)
    return result.rowcount > 0
