"""Core Layer: pure domain logic, no IO, no async, no network.

Invariants:
    - No module in core/ imports from services/, infrastructure/, or client.py
    - Functions that rewrite collections return new containers; callers swap them in

Design Decisions:
    - Functional core separated from imperative shell (ADR: impureim sandwich)
"""
