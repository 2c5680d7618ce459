"""Tracker Client: composition root wiring gateway, storage, store and auth session.

Invariants:
    - One gateway, one store, one session per client; nothing is module-global
    - The persisted session is restored on construction
    - aclose() (or leaving `async with`) closes the HTTP connection pool

Design Decisions:
    - Explicit construction over singletons: tests build clients with fakes
"""

import logging

from tracker.config import Settings, get_settings
from tracker.core.gateway_protocols import SessionStorage
from tracker.infrastructure.http_gateway import HttpGateway
from tracker.infrastructure.observability import setup_logging
from tracker.infrastructure.session_storage import JsonFileStorage
from tracker.services.auth_session import AuthSessionManager
from tracker.services.entity_store import EntityStore

logger = logging.getLogger(__name__)


class TrackerClient:
    """Entry point: `async with TrackerClient.from_settings() as client: ...`."""

    def __init__(self, gateway: HttpGateway, storage: SessionStorage):
        self.gateway = gateway
        self.storage = storage
        self.store = EntityStore(gateway)
        self.auth = AuthSessionManager(gateway, storage, self.store)
        self.auth.restore()

    @classmethod
    def from_settings(
        cls, settings: Settings | None = None, configure_logging: bool = False,
    ) -> "TrackerClient":
        settings = settings or get_settings()
        if configure_logging:
            setup_logging(settings.log_level, settings.log_format)
        gateway = HttpGateway(
            settings.api_base_url, timeout_seconds=settings.request_timeout_seconds,
        )
        client = cls(gateway, JsonFileStorage(settings.session_file))
        logger.info(
            f"Tracker client ready for {settings.api_base_url}",
            extra={"operation": "startup"},
        )
        return client

    async def aclose(self) -> None:
        await self.gateway.aclose()

    async def __aenter__(self) -> "TrackerClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
