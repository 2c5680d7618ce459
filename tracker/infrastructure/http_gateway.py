"""HTTP Gateway: one httpx request per remote operation, with error mapping.

Invariants:
    - Exactly one request per method call; no retries, no caching
    - Token header attached only while a provider is attached and returns a value
    - The provider is called on every request (logout mid-flight takes effect)
    - All failures mapped to GatewayError subclasses (core/errors.py):
        transport/timeout -> TransportFailure
        401/403 -> UnauthorizedError, 404 -> RemoteNotFoundError
        400/409/422 -> ValidationRejectedError, other non-2xx -> RemoteServerError
        undecodable 2xx body -> PayloadError
    - Empty bodies (204, zero length) decode to None

Design Decisions:
    - Resource classes share one request() on the gateway: error mapping lives in one place
    - transport injectable: tests drive the real client through httpx.MockTransport
"""

import logging
from typing import Any

import httpx

from tracker.core.domain_types import (
    CardId, CommentId, ProjectId, ResourceFamily, TaskId, UserId,
)
from tracker.core.errors import (
    ErrorContext,
    GatewayError,
    PayloadError,
    RemoteNotFoundError,
    RemoteServerError,
    TransportFailure,
    UnauthorizedError,
    ValidationRejectedError,
)
from tracker.core.gateway_protocols import TokenProvider

logger = logging.getLogger(__name__)

TOKEN_HEADER = "Token"
_DEFAULT_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}
_VALIDATION_STATUSES = frozenset({400, 409, 422})
_UNAUTHORIZED_STATUSES = frozenset({401, 403})


def _error_detail(response: httpx.Response) -> Any:
    """Best-effort decode of an error body for messages and details."""
    try:
        return response.json()
    except ValueError:
        return response.text or None


def map_status_error(response: httpx.Response, operation: str) -> GatewayError:
    """Translate a non-2xx response into the gateway taxonomy."""
    status = response.status_code
    detail = _error_detail(response)
    context = ErrorContext(operation=operation, debug_info={"detail": detail})
    message = f"{operation} failed with HTTP {status}"
    if status in _UNAUTHORIZED_STATUSES:
        return UnauthorizedError(message, status_code=status, context=context)
    if status == 404:
        return RemoteNotFoundError(message, context=context)
    if status in _VALIDATION_STATUSES:
        return ValidationRejectedError(
            message, status_code=status, details=detail, context=context,
        )
    return RemoteServerError(message, status_code=status, context=context)


class _Resource:
    family: ResourceFamily

    def __init__(self, gateway: "HttpGateway"):
        self._gateway = gateway

    async def _call(
        self, name: str, method: str, path: str, payload: Any = None,
    ) -> Any:
        return await self._gateway.request(
            method, path, json=payload, operation=f"{self.family.value}.{name}",
        )


class ProjectsResource(_Resource):
    family = ResourceFamily.PROJECTS

    async def list(self) -> Any:
        return await self._call("list", "GET", "/projects")

    async def get(self, project_id: ProjectId) -> Any:
        return await self._call("get", "GET", f"/projects/{project_id}")

    async def create(self, data: dict) -> Any:
        return await self._call("create", "POST", "/projects", data)

    async def update(self, data: dict) -> Any:
        return await self._call("update", "PUT", f"/projects/{data['id']}", data)

    async def delete(self, project_id: ProjectId) -> Any:
        return await self._call("delete", "DELETE", f"/projects/{project_id}")

    async def list_members(self, project_id: ProjectId) -> Any:
        return await self._call("list_members", "GET", f"/projects/{project_id}/users")

    async def assign_member(
        self, project_id: ProjectId, user_id: UserId, permissions: Any,
    ) -> Any:
        return await self._call(
            "assign_member", "POST", f"/projects/{project_id}/users/{user_id}",
            {"permissions": permissions},
        )

    async def update_member_permissions(
        self, project_id: ProjectId, user_id: UserId, permissions: Any,
    ) -> Any:
        return await self._call(
            "update_member_permissions", "PUT",
            f"/projects/{project_id}/users/{user_id}",
            {"permissions": permissions},
        )

    async def remove_member(self, project_id: ProjectId, user_id: UserId) -> Any:
        return await self._call(
            "remove_member", "DELETE", f"/projects/{project_id}/users/{user_id}",
        )


class TasksResource(_Resource):
    family = ResourceFamily.TASKS

    async def list_by_project(self, project_id: ProjectId) -> Any:
        return await self._call("list_by_project", "GET", f"/projects/{project_id}/tasks")

    async def get(self, task_id: TaskId) -> Any:
        return await self._call("get", "GET", f"/tasks/{task_id}")

    async def create(self, project_id: ProjectId, data: dict) -> Any:
        return await self._call("create", "POST", f"/projects/{project_id}/tasks", data)

    async def update(self, data: dict) -> Any:
        return await self._call("update", "PUT", f"/tasks/{data['id']}", data)

    async def delete(self, task_id: TaskId) -> Any:
        return await self._call("delete", "DELETE", f"/tasks/{task_id}")

    async def patch_priority(self, task_id: TaskId, priority: Any) -> Any:
        return await self._call(
            "patch_priority", "PATCH", f"/tasks/{task_id}/priority", {"priority": priority},
        )

    async def patch_status(self, task_id: TaskId, status: Any) -> Any:
        return await self._call(
            "patch_status", "PATCH", f"/tasks/{task_id}/status", {"status": status},
        )

    async def patch_card(self, task_id: TaskId, card_id: CardId | None) -> Any:
        return await self._call(
            "patch_card", "PATCH", f"/tasks/{task_id}/card", {"card_id": card_id},
        )


class CardsResource(_Resource):
    family = ResourceFamily.CARDS

    async def list_by_project(self, project_id: ProjectId) -> Any:
        return await self._call("list_by_project", "GET", f"/projects/{project_id}/cards")

    async def create(self, project_id: ProjectId, data: dict) -> Any:
        return await self._call("create", "POST", f"/projects/{project_id}/cards", data)

    async def get(self, card_id: CardId) -> Any:
        return await self._call("get", "GET", f"/cards/{card_id}")

    async def update(self, data: dict) -> Any:
        return await self._call("update", "PUT", f"/cards/{data['id']}", data)

    async def delete(self, card_id: CardId) -> Any:
        return await self._call("delete", "DELETE", f"/cards/{card_id}")

    async def assign_task(self, card_id: CardId, task_id: TaskId) -> Any:
        return await self._call("assign_task", "POST", f"/cards/{card_id}/tasks/{task_id}")

    async def remove_task(self, card_id: CardId, task_id: TaskId) -> Any:
        return await self._call("remove_task", "DELETE", f"/cards/{card_id}/tasks/{task_id}")


class CommentsResource(_Resource):
    family = ResourceFamily.COMMENTS

    async def list_by_task(self, task_id: TaskId) -> Any:
        return await self._call("list_by_task", "GET", f"/tasks/{task_id}/comments")

    async def create(self, task_id: TaskId, content: str) -> Any:
        return await self._call(
            "create", "POST", f"/tasks/{task_id}/comments", {"content": content},
        )

    async def update(self, comment_id: CommentId, content: str) -> Any:
        return await self._call(
            "update", "PUT", f"/comments/{comment_id}", {"content": content},
        )

    async def delete(self, comment_id: CommentId) -> Any:
        return await self._call("delete", "DELETE", f"/comments/{comment_id}")


class ReportsResource(_Resource):
    family = ResourceFamily.REPORTS

    async def get_by_project(self, project_id: ProjectId) -> Any:
        return await self._call("get_by_project", "GET", f"/reports/projects/{project_id}")

    async def get_by_user(self, user_id: UserId) -> Any:
        return await self._call("get_by_user", "GET", f"/reports/users/{user_id}")


class AuthResource(_Resource):
    family = ResourceFamily.AUTH

    async def register(self, user_data: dict) -> Any:
        return await self._call("register", "POST", "/auth/register", user_data)

    async def login(self, email: str, password: str) -> Any:
        return await self._call(
            "login", "POST", "/auth/login", {"email": email, "password": password},
        )


class UsersResource(_Resource):
    family = ResourceFamily.USERS

    async def list(self) -> Any:
        return await self._call("list", "GET", "/users")


class HttpGateway:
    """Remote gateway over httpx.AsyncClient. Owns no entity state."""

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout_seconds,
            headers=_DEFAULT_HEADERS,
            transport=transport,
        )
        self._token_provider: TokenProvider | None = None

        self.projects = ProjectsResource(self)
        self.tasks = TasksResource(self)
        self.cards = CardsResource(self)
        self.comments = CommentsResource(self)
        self.reports = ReportsResource(self)
        self.auth = AuthResource(self)
        self.users = UsersResource(self)

    def attach_token(self, provider: TokenProvider) -> None:
        self._token_provider = provider

    def detach_token(self) -> None:
        self._token_provider = None

    @property
    def has_token(self) -> bool:
        return self._token_provider is not None

    def _auth_headers(self) -> dict[str, str]:
        if self._token_provider is None:
            return {}
        token = self._token_provider()
        return {TOKEN_HEADER: token} if token else {}

    async def request(
        self, method: str, path: str, *, json: Any = None, operation: str,
    ) -> Any:
        """Perform one call. Returns the decoded body or raises GatewayError."""
        try:
            response = await self.client.request(
                method, path, json=json, headers=self._auth_headers(),
            )
        except httpx.TimeoutException as e:
            raise TransportFailure(
                f"{operation} timed out: {e}",
                context=ErrorContext(operation=operation),
            ) from e
        except httpx.TransportError as e:
            raise TransportFailure(
                f"{operation} transport error: {e}",
                context=ErrorContext(operation=operation),
            ) from e

        if not response.is_success:
            error = map_status_error(response, operation)
            logger.debug(
                f"Gateway call failed: {method} {path}",
                extra={
                    "operation": operation,
                    "status_code": response.status_code,
                    "error_code": error.code,
                },
            )
            raise error

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise PayloadError(
                f"{operation} returned a non-JSON body",
                context=ErrorContext(operation=operation),
            ) from e

    async def aclose(self) -> None:
        await self.client.aclose()
