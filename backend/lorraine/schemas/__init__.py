"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (user input, API responses)
    - Domain enums from core/ used for closed-set fields

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
    - Responses built from core dataclasses with from_attributes
"""
