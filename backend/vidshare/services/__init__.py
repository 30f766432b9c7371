"""Services Layer — credentials, tokens, catalog, engagement, subscriptions,
history and comments.

Invariants:
    - Each service wraps one AsyncSession and owns its commit points
    - Counter and membership changes commit together or not at all

Design Decisions:
    - One service class per aggregate, constructed per request by the routes
"""
