"""StoreState and AuthSession: pure tests for the in-memory state containers.

Tests cover:
    - Initial state is empty
    - reset() clears every collection, report and error
    - tasks_loaded_for only matches the fetched project
    - AuthSession.logged_in follows the token
"""

from tracker.core.errors import RemoteServerError
from tracker.core.session_state import AuthSession
from tracker.core.store_state import StoreState
from tracker.schemas.entities import Card, Project, Task, User
from tracker.schemas.reports import ProjectReport, UserReport


def _filled_state() -> StoreState:
    state = StoreState()
    state.projects = {1: Project(id=1, name="P")}
    state.tasks = {2: Task(id=2, project_id=1)}
    state.cards = {3: Card(id=3, project_id=1)}
    state.users = {4: User(id=4)}
    state.current_project = state.projects[1]
    state.project_report = ProjectReport(project_id=1)
    state.user_report = UserReport(user_id=4)
    state.tasks_project_id = 1
    state.last_error = RemoteServerError("boom", 500)
    return state


def test_initial_state_is_empty():
    state = StoreState()
    assert state.is_empty
    assert state.last_error is None
    assert state.tasks_project_id is None


def test_filled_state_is_not_empty():
    assert not _filled_state().is_empty


def test_reset_clears_everything():
    state = _filled_state()
    state.reset()
    assert state.is_empty
    assert state.projects == {}
    assert state.tasks == {}
    assert state.cards == {}
    assert state.users == {}
    assert state.tasks_project_id is None
    assert state.last_error is None


def test_tasks_loaded_for():
    state = StoreState()
    assert not state.tasks_loaded_for(1)
    state.tasks_project_id = 1
    assert state.tasks_loaded_for(1)
    assert not state.tasks_loaded_for(2)
    assert not state.tasks_loaded_for(None)


def test_auth_session_logged_in_follows_token():
    session = AuthSession()
    assert not session.logged_in
    session.establish("abc", 7)
    assert session.logged_in
    assert session.user_id == 7
    session.clear()
    assert not session.logged_in
    assert session.user_id is None


def test_auth_session_empty_token_is_logged_out():
    session = AuthSession(token="")
    assert not session.logged_in
