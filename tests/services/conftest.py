"""Service test fixtures: fake gateway, entity store, auth session.

Invariants:
    - Every test gets a fresh FakeGateway, StoreState and MemoryStorage
    - seeded_board builds one project with two cards and three tasks through the store
"""

import pytest

from tracker.infrastructure.session_storage import MemoryStorage
from tracker.services.auth_session import AuthSessionManager
from tracker.services.entity_store import EntityStore

from tests.services.fake_gateway import FakeGateway


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def store(gateway):
    return EntityStore(gateway)


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def auth(gateway, storage, store):
    return AuthSessionManager(gateway, storage, store)


@pytest.fixture
async def seeded_board(store):
    """Project P with cards A, B and tasks t1 (in A), t2 (in A), t3 (no card)."""
    creation = await store.create_project({"name": "Board", "description": "demo"})
    project = creation.project
    card_a = await store.create_card(project.id, {"name": "A"})
    card_b = await store.create_card(project.id, {"name": "B"})
    t1 = await store.create_task(project.id, {"title": "t1", "card_id": card_a.id})
    t2 = await store.create_task(project.id, {"title": "t2", "card_id": card_a.id})
    t3 = await store.create_task(project.id, {"title": "t3"})
    await store.fetch_tasks(project.id)
    return {
        "project": project, "a": card_a, "b": card_b,
        "t1": t1, "t2": t2, "t3": t3,
    }
