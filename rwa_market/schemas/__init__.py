"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (user input, API responses)
    - Amounts cross the wire as strings

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
