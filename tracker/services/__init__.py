"""Services Layer: the Entity Store, its per-family operations, and the auth session.

Invariants:
    - Operations split by resource family (projects, tasks, cards, directory, comments)
    - EntityStore wires every operation explicitly (no auto-discovery)
"""
