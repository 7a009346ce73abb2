"""Pydantic Schemas — shape checks for upstream responses.

Invariants:
    - Schemas validate at system boundary (upstream JSON)
    - Validation only: the caller still receives the upstream body verbatim
"""
