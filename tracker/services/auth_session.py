"""Auth Session Manager: token acquisition, persistence, attachment and invalidation.

Invariants:
    - logged_in is true iff a non-empty token is held (AuthSession.logged_in)
    - login writes durable storage ONLY when the response carries a token
    - A login without a token, or a failed login call, leaves the session logged out
      and never raises; if a session was held it is ended exactly like logout()
    - logout is local (no gateway call): clears storage, detaches the token, wipes the store
    - register never touches session state and propagates GatewayError
    - Storage without a token reads as logged out, whatever loggedIn says

Design Decisions:
    - The gateway gets a provider bound to this manager, so a logout during an
      in-flight call is seen by every later request
"""

import logging
from typing import Any

from tracker.core.domain_types import EntityId, StorageKey
from tracker.core.errors import GatewayError
from tracker.core.gateway_protocols import Gateway, SessionStorage
from tracker.core.session_state import AuthSession
from tracker.schemas.auth import Credentials, LoginResult
from tracker.services.entity_store import EntityStore
from tracker.services.store_helpers import as_payload, parse_model

logger = logging.getLogger(__name__)


class AuthSessionManager:
    """Owns the AuthSession for one client."""

    def __init__(
        self, gateway: Gateway, storage: SessionStorage, store: EntityStore,
    ):
        self.gateway = gateway
        self.storage = storage
        self.store = store
        self.session = AuthSession()

    @property
    def token(self) -> str | None:
        return self.session.token

    @property
    def user_id(self) -> EntityId | None:
        return self.session.user_id

    @property
    def logged_in(self) -> bool:
        return self.session.logged_in

    def _current_token(self) -> str | None:
        return self.session.token

    def restore(self) -> bool:
        """Load the persisted session, if any. Returns logged_in."""
        token = self.storage.get(StorageKey.TOKEN.value)
        if token:
            self.session.establish(token, self.storage.get(StorageKey.USER_ID.value))
            self.gateway.attach_token(self._current_token)
            logger.info("Session restored", extra={"user_id": self.session.user_id})
        else:
            self.session.clear()
            self.gateway.detach_token()
        return self.session.logged_in

    async def login(self, credentials: Credentials | dict) -> LoginResult | None:
        creds = Credentials.model_validate(credentials)
        try:
            data = await self.gateway.auth.login(creds.email, creds.password)
            result = parse_model(LoginResult, data or {}, "login")
        except GatewayError as e:
            logger.warning(
                f"Login failed: {e.message}",
                extra={"operation": "login", "error_code": e.code,
                       "status_code": e.status_code},
            )
            self._end_failed_login()
            return None

        if not result.has_token:
            logger.warning(
                "Login response carried no token",
                extra={"operation": "login"},
            )
            self._end_failed_login()
            return None

        self._persist(result.token, result.user_id)
        self.session.establish(result.token, result.user_id)
        self.gateway.attach_token(self._current_token)
        logger.info("Logged in", extra={"user_id": result.user_id})
        return result

    def _end_failed_login(self) -> None:
        """A live session is logged out in full; otherwise nothing is written."""
        if self.session.logged_in:
            self.logout()
        else:
            self.session.clear()

    def _persist(self, token: str, user_id: EntityId | None) -> None:
        self.storage.set(StorageKey.TOKEN.value, token)
        self.storage.set(StorageKey.LOGGED_IN.value, "true")
        if user_id is not None:
            self.storage.set(StorageKey.USER_ID.value, str(user_id))

    def logout(self) -> None:
        self.storage.remove(StorageKey.TOKEN.value)
        self.storage.remove(StorageKey.USER_ID.value)
        self.storage.set(StorageKey.LOGGED_IN.value, "false")
        self.gateway.detach_token()
        self.session.clear()
        self.store.reset()
        logger.info("Logged out")

    async def register(self, data: Any) -> Any:
        """Create an account. Does not log in."""
        try:
            return await self.gateway.auth.register(as_payload(data))
        except GatewayError as e:
            logger.warning(
                f"Registration failed: {e.message}",
                extra={"operation": "register", "error_code": e.code,
                       "status_code": e.status_code},
            )
            raise
