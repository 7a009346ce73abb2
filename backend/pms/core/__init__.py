"""Core Layer — pure request construction, domain types, error hierarchy.

Invariants:
    - No I/O: core never performs network calls or reads the environment
"""
