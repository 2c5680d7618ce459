"""Boundary Protocols: contracts between the store and the remote service / durable storage.

Invariants:
    - Core NEVER imports from shell; implementations are injected
    - Every gateway method performs exactly one remote operation and owns no state
    - Gateway methods return the decoded `data` payload or raise GatewayError
    - The token is read through a provider on every call, never copied

Design Decisions:
    - Protocol over ABC: structural subtyping, fakes need no inheritance
    - One Protocol per resource family, grouped on a Gateway attribute each
"""

from collections.abc import Callable
from typing import Any, Protocol

from tracker.core.domain_types import CardId, CommentId, ProjectId, TaskId, UserId

TokenProvider = Callable[[], str | None]


class ProjectsGateway(Protocol):
    async def list(self) -> Any: ...
    async def get(self, project_id: ProjectId) -> Any: ...
    async def create(self, data: dict) -> Any: ...
    async def update(self, data: dict) -> Any: ...
    async def delete(self, project_id: ProjectId) -> Any: ...
    async def list_members(self, project_id: ProjectId) -> Any: ...
    async def assign_member(
        self, project_id: ProjectId, user_id: UserId, permissions: Any,
    ) -> Any: ...
    async def update_member_permissions(
        self, project_id: ProjectId, user_id: UserId, permissions: Any,
    ) -> Any: ...
    async def remove_member(self, project_id: ProjectId, user_id: UserId) -> Any: ...


class TasksGateway(Protocol):
    async def list_by_project(self, project_id: ProjectId) -> Any: ...
    async def get(self, task_id: TaskId) -> Any: ...
    async def create(self, project_id: ProjectId, data: dict) -> Any: ...
    async def update(self, data: dict) -> Any: ...
    async def delete(self, task_id: TaskId) -> Any: ...
    async def patch_priority(self, task_id: TaskId, priority: Any) -> Any: ...
    async def patch_status(self, task_id: TaskId, status: Any) -> Any: ...
    async def patch_card(self, task_id: TaskId, card_id: CardId | None) -> Any: ...


class CardsGateway(Protocol):
    async def list_by_project(self, project_id: ProjectId) -> Any: ...
    async def create(self, project_id: ProjectId, data: dict) -> Any: ...
    async def get(self, card_id: CardId) -> Any: ...
    async def update(self, data: dict) -> Any: ...
    async def delete(self, card_id: CardId) -> Any: ...
    async def assign_task(self, card_id: CardId, task_id: TaskId) -> Any: ...
    async def remove_task(self, card_id: CardId, task_id: TaskId) -> Any: ...


class CommentsGateway(Protocol):
    async def list_by_task(self, task_id: TaskId) -> Any: ...
    async def create(self, task_id: TaskId, content: str) -> Any: ...
    async def update(self, comment_id: CommentId, content: str) -> Any: ...
    async def delete(self, comment_id: CommentId) -> Any: ...


class ReportsGateway(Protocol):
    async def get_by_project(self, project_id: ProjectId) -> Any: ...
    async def get_by_user(self, user_id: UserId) -> Any: ...


class AuthGateway(Protocol):
    async def register(self, user_data: dict) -> Any: ...
    async def login(self, email: str, password: str) -> Any: ...


class UsersGateway(Protocol):
    async def list(self) -> Any: ...


class Gateway(Protocol):
    """The whole remote service, one attribute per capability group."""
    projects: ProjectsGateway
    tasks: TasksGateway
    cards: CardsGateway
    comments: CommentsGateway
    reports: ReportsGateway
    auth: AuthGateway
    users: UsersGateway

    def attach_token(self, provider: TokenProvider) -> None: ...
    def detach_token(self) -> None: ...


class SessionStorage(Protocol):
    """Durable string key-value storage for the auth session."""
    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def remove(self, key: str) -> None: ...
