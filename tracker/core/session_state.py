"""Auth Session State: token, user id and the derived logged-in flag.

Invariants:
    - logged_in is true iff a non-empty token is held
    - clear() drops token and user id together
"""

from dataclasses import dataclass

from tracker.core.domain_types import EntityId


@dataclass
class AuthSession:
    """Process-wide session for one client. Pure dataclass, no IO."""

    token: str | None = None
    user_id: EntityId | None = None

    @property
    def logged_in(self) -> bool:
        return bool(self.token)

    def establish(self, token: str, user_id: EntityId | None = None) -> None:
        self.token = token
        self.user_id = user_id

    def clear(self) -> None:
        self.token = None
        self.user_id = None
