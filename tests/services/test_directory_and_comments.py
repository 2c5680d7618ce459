"""Directory and Comment Operations: users, reports, and uncached comments."""

import pytest

from tracker.core.errors import RemoteNotFoundError


@pytest.mark.asyncio
async def test_fetch_users_replaces(store, gateway):
    gateway.server.users = {1: {"id": 1, "name": "Ann", "email": "a@x.io"}}
    users = await store.fetch_users()
    assert [u.email for u in users] == ["a@x.io"]
    assert [u.id for u in store.users] == [1]


@pytest.mark.asyncio
async def test_fetch_users_failure_preserves(store, gateway):
    gateway.server.users = {1: {"id": 1, "name": "Ann"}}
    await store.fetch_users()
    gateway.fail("users.list")
    assert await store.fetch_users() == []
    assert [u.id for u in store.users] == [1]


@pytest.mark.asyncio
async def test_project_report_metrics(store, seeded_board):
    project = seeded_board["project"]
    await store.update_task_status(seeded_board["t1"].id, "done")
    report = await store.fetch_project_report(project.id)
    assert report.project_id == project.id
    assert report.metrics() == {"total_tasks": 3, "done_tasks": 1}
    assert store.state.project_report == report


@pytest.mark.asyncio
async def test_user_report_fills_user_id(store, seeded_board):
    await store.update_task_assigned_user(seeded_board["t2"].id, 7)
    report = await store.fetch_user_report(7)
    assert report.user_id == 7
    assert report.metrics() == {"assigned_tasks": 1}
    assert store.state.user_report == report


@pytest.mark.asyncio
async def test_report_failure_keeps_previous(store, gateway, seeded_board):
    project = seeded_board["project"]
    first = await store.fetch_project_report(project.id)
    gateway.fail("reports.get_by_project")
    assert await store.fetch_project_report(project.id) is None
    assert store.state.project_report == first


# ─── comments ────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_comment_lifecycle(store, gateway, seeded_board):
    t1 = seeded_board["t1"]
    comment = await store.add_comment(t1.id, "first")
    assert comment.task_id == t1.id
    assert comment.content == "first"

    edited = await store.update_comment(comment.id, "edited")
    assert edited.content == "edited"

    comments = await store.fetch_task_comments(t1.id)
    assert [c.content for c in comments] == ["edited"]

    assert await store.delete_comment(comment.id) is True
    assert await store.fetch_task_comments(t1.id) == []


@pytest.mark.asyncio
async def test_comments_are_not_cached(store, seeded_board):
    await store.add_comment(seeded_board["t1"].id, "hello")
    assert not hasattr(store.state, "comments")


@pytest.mark.asyncio
async def test_comment_failures(store, gateway):
    assert await store.update_comment(404, "x") is None
    assert isinstance(store.state.last_error, RemoteNotFoundError)
    assert store.state.last_error.context.resource_ids == {"comment_id": 404}
    assert await store.delete_comment(404) is False
