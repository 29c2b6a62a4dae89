"""Pydantic Schemas — response contracts for API endpoints.

Invariants:
    - Schemas validate at system boundary (API responses)
    - Domain enums from core/ used for enum fields

Design Decisions:
    - Separate from core dataclasses: schemas are API contracts, core types are game state
"""
