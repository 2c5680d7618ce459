"""Tracker Client Package: relational state synchronization for a project/task tracker.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
    - Entry point is tracker.client.TrackerClient; everything else is importable by layer
"""
