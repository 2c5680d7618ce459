"""Pydantic Schemas: wire models for entities returned by the tracker service.

Invariants:
    - Schemas validate at the system boundary (gateway payloads, caller input)
    - Unknown server fields are kept, never dropped
"""
