"""Task Operations: fetch, create, edit and delete tasks.

Invariants:
    - Edits replace the cached task by id and overwrite its embedded card copy
    - An edit whose response carries a new card_id is applied as a move
    - update_task_assigned_user sends the cached task through tasks.update
    - create_task inserts into the collection and, when card_id is set, into that card
    - delete_task removes the task from the collection and from every card
    - fetch_tasks rebuilds the card lists of the fetched project
"""

import logging
from collections.abc import Awaitable
from typing import Any

from tracker.core.denormalize import rebuild_card_tasks, remove_task
from tracker.core.domain_types import ProjectId, TaskId, UserId
from tracker.core.errors import GatewayError
from tracker.schemas.entities import Task
from tracker.services.store_helpers import (
    StoreOperations,
    as_payload,
    parse_model,
    parse_models_with_defaults,
    unwrap,
)

logger = logging.getLogger(__name__)


class TaskOperations(StoreOperations):
    """Task CRUD and field patches."""

    async def fetch_tasks(self, project_id: ProjectId) -> list[Task]:
        try:
            data = await self.gateway.tasks.list_by_project(project_id)
            tasks = parse_models_with_defaults(
                Task, data, "tasks", "fetch_tasks", {"project_id": project_id},
            )
        except GatewayError as e:
            self._record_failure("fetch_tasks", e, project_id=project_id)
            return []
        by_id = {t.id: t for t in tasks}
        cards = rebuild_card_tasks(self.state.cards, by_id, project_id)
        self.state.tasks = by_id
        self.state.cards = cards
        self.state.tasks_project_id = project_id
        self._record_success()
        logger.debug(
            "Tasks loaded",
            extra={"project_id": project_id, "count": len(tasks)},
        )
        return tasks

    async def fetch_task(self, task_id: TaskId) -> Task | None:
        try:
            data = await self.gateway.tasks.get(task_id)
            task = parse_model(Task, unwrap(data, "task"), "fetch_task")
        except GatewayError as e:
            self._record_failure("fetch_task", e, task_id=task_id)
            return None
        self.commit_task(task)
        self._record_success()
        return task

    async def create_task(self, project_id: ProjectId, data: Any) -> Task | None:
        payload = as_payload(data)
        try:
            created = await self.gateway.tasks.create(project_id, payload)
            raw = unwrap(created, "task")
            if isinstance(raw, dict) and raw.get("project_id") is None:
                raw = {**raw, "project_id": project_id}
            task = parse_model(Task, raw, "create_task")
        except GatewayError as e:
            self._record_failure("create_task", e, project_id=project_id)
            return None
        self.commit_task(task, insert=True)
        self._record_success()
        return task

    async def update_task(self, data: Any) -> Task | None:
        payload = as_payload(data)
        return await self._apply_update(
            "update_task", payload.get("id"), self.gateway.tasks.update(payload),
        )

    async def update_task_status(self, task_id: TaskId, status: Any) -> Task | None:
        return await self._apply_update(
            "update_task_status", task_id,
            self.gateway.tasks.patch_status(task_id, status),
        )

    async def update_task_priority(self, task_id: TaskId, priority: Any) -> Task | None:
        return await self._apply_update(
            "update_task_priority", task_id,
            self.gateway.tasks.patch_priority(task_id, priority),
        )

    async def update_task_assigned_user(
        self, task_id: TaskId, user_id: UserId | None,
    ) -> Task | None:
        """Reassign through the full task update; there is no assignment endpoint."""
        cached = self.state.tasks.get(task_id)
        payload = cached.model_dump(exclude_none=True) if cached else {"id": task_id}
        payload["assigned_user_id"] = user_id
        return await self._apply_update(
            "update_task_assigned_user", task_id, self.gateway.tasks.update(payload),
        )

    async def _apply_update(
        self, operation: str, task_id: TaskId | None, call: Awaitable[Any],
    ) -> Task | None:
        try:
            data = await call
            task = parse_model(Task, unwrap(data, "task"), operation)
        except GatewayError as e:
            self._record_failure(operation, e, task_id=task_id)
            return None
        self.commit_task(task)
        self._record_success()
        return task

    async def delete_task(self, task_id: TaskId) -> bool:
        try:
            await self.gateway.tasks.delete(task_id)
        except GatewayError as e:
            self._record_failure("delete_task", e, task_id=task_id)
            return False
        tasks = {tid: t for tid, t in self.state.tasks.items() if tid != task_id}
        cards = remove_task(self.state.cards, task_id)
        self.state.tasks = tasks
        self.state.cards = cards
        self._record_success()
        return True
