"""Infrastructure Layer: HTTP gateway, durable session storage, logging setup.

Invariants:
    - Infrastructure never imports from services/
    - All transport failures mapped to GatewayError subclasses (core/errors.py)
"""
