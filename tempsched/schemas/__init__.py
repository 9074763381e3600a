"""Pydantic Schemas: request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (user input, API responses)
    - Timestamps must carry a timezone; naive datetimes are rejected

Design Decisions:
    - Separate from core dataclasses: schemas are API contracts, core types are
      what the algebra works on; to_domain()/from_domain() convert between them
"""
