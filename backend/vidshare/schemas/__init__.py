"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (user input, API responses)
    - Wire format is camelCase; Python attributes stay snake_case
    - password_hash and refresh_token have no schema field and can never be serialized

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
