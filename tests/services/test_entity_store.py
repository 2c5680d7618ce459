"""Entity Store: read views, local reorder and reset.

Tests cover:
    - Reorder is local (no gateway call) and reversible
    - Card-scoped task reorder touches only that card's list
    - Invalid indices raise and leave state unchanged
    - reset() wipes every collection
"""

import pytest

from tracker.core.errors import EntityNotCachedError, InvalidReorderError


@pytest.mark.asyncio
async def test_reorder_cards_is_local(store, gateway, seeded_board):
    calls_before = len(gateway.calls)
    reordered = store.reorder_cards(1, 0)
    assert [c.name for c in reordered] == ["B", "A"]
    assert [c.name for c in store.cards] == ["B", "A"]
    assert len(gateway.calls) == calls_before


@pytest.mark.asyncio
async def test_reorder_cards_keeps_positions(store, seeded_board):
    positions = {c.id: c.position for c in store.cards}
    store.reorder_cards(0, 1)
    assert {c.id: c.position for c in store.cards} == positions


@pytest.mark.asyncio
async def test_reorder_tasks_then_inverse_restores(store, seeded_board):
    original = [t.id for t in store.tasks]
    store.reorder_tasks(0, 2)
    assert [t.id for t in store.tasks] != original
    store.reorder_tasks(2, 0)
    assert [t.id for t in store.tasks] == original


@pytest.mark.asyncio
async def test_reorder_tasks_within_card(store, seeded_board):
    a, t1, t2 = seeded_board["a"], seeded_board["t1"], seeded_board["t2"]
    tasks_before = store.state.tasks
    result = store.reorder_tasks(0, 1, card_id=a.id)
    assert [t.id for t in result] == [t2.id, t1.id]
    assert [t.id for t in store.card(a.id).tasks] == [t2.id, t1.id]
    assert store.state.tasks is tasks_before


@pytest.mark.asyncio
async def test_reorder_out_of_range_leaves_state(store, seeded_board):
    before = [c.id for c in store.cards]
    with pytest.raises(InvalidReorderError):
        store.reorder_cards(0, 5)
    assert [c.id for c in store.cards] == before


def test_reorder_same_index_on_empty_store_is_noop(store):
    assert store.reorder_tasks(0, 0) == []
    assert store.reorder_cards(2, 2) == []


@pytest.mark.asyncio
async def test_reorder_same_index_keeps_order(store, seeded_board):
    before = [t.id for t in store.tasks]
    store.reorder_tasks(1, 1)
    assert [t.id for t in store.tasks] == before
    b = seeded_board["b"]
    assert store.reorder_tasks(0, 0, card_id=b.id) == []


def test_reorder_unknown_card_raises(store):
    with pytest.raises(EntityNotCachedError):
        store.reorder_tasks(0, 1, card_id="missing")


@pytest.mark.asyncio
async def test_read_views_are_copies(store, seeded_board):
    store.tasks.clear()
    assert len(store.tasks) == 3


@pytest.mark.asyncio
async def test_reset_wipes_store(store, seeded_board):
    await store.fetch_project(seeded_board["project"].id)
    store.reset()
    assert store.projects == []
    assert store.tasks == []
    assert store.cards == []
    assert store.state.current_project is None
    assert store.state.is_empty
