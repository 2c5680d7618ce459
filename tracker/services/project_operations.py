"""Project Operations: projects, current project, and project membership.

Invariants:
    - fetch_projects replaces the collection on success, preserves it on failure
    - create_project is best-effort: member steps run sequentially and independently,
      a failed step is recorded in ProjectCreation.steps and never rolls back
    - delete_project removes the project plus its tasks, cards, report and current_project
"""

import logging
from collections.abc import Iterable
from typing import Any

from tracker.core.denormalize import remove_tasks
from tracker.core.domain_types import ProjectId, UserId
from tracker.core.errors import GatewayError
from tracker.schemas.entities import MemberAssignment, Project, User
from tracker.schemas.outcomes import ProjectCreation, StepOutcome
from tracker.services.store_helpers import (
    StoreOperations, as_payload, parse_model, parse_models, unwrap,
)

logger = logging.getLogger(__name__)


class ProjectOperations(StoreOperations):
    """Project and membership operations."""

    async def fetch_projects(self) -> list[Project]:
        try:
            data = await self.gateway.projects.list()
            projects = parse_models(Project, data, "projects", "fetch_projects")
        except GatewayError as e:
            self._record_failure("fetch_projects", e)
            return []
        self.state.projects = {p.id: p for p in projects}
        self._record_success()
        return projects

    async def fetch_project(self, project_id: ProjectId) -> Project | None:
        try:
            data = await self.gateway.projects.get(project_id)
            project = parse_model(Project, unwrap(data, "project"), "fetch_project")
        except GatewayError as e:
            self._record_failure("fetch_project", e, project_id=project_id)
            return None
        self.state.current_project = project
        if project.id in self.state.projects:
            self.state.projects = {**self.state.projects, project.id: project}
        self._record_success()
        return project

    async def create_project(
        self, data: Any, members: Iterable[MemberAssignment | dict] = (),
    ) -> ProjectCreation | None:
        """Create a project, then assign each member. Returns per-step outcomes."""
        payload = as_payload(data)
        requested = [MemberAssignment.model_validate(m) for m in members]
        try:
            created = await self.gateway.projects.create(payload)
            project = parse_model(Project, unwrap(created, "project"), "create_project")
        except GatewayError as e:
            self._record_failure("create_project", e)
            return None
        self.state.projects = {**self.state.projects, project.id: project}

        steps = []
        for index, member in enumerate(requested):
            steps.append(await self._assign_step(project.id, member, index))

        self._record_success()
        return ProjectCreation(project=project, steps=steps)

    async def _assign_step(
        self, project_id: ProjectId, member: MemberAssignment, index: int,
    ) -> StepOutcome:
        try:
            await self.gateway.projects.assign_member(
                project_id, member.user_id, member.permissions,
            )
        except GatewayError as e:
            logger.warning(
                f"Member assignment skipped: {e.message}",
                extra={
                    "operation": "create_project",
                    "project_id": project_id,
                    "user_id": member.user_id,
                    "error_code": e.code,
                    "step": index,
                },
            )
            return StepOutcome(
                user_id=member.user_id, ok=False,
                error_code=e.code, error_message=e.message,
            )
        return StepOutcome(user_id=member.user_id, ok=True)

    async def update_project(self, data: Any) -> Project | None:
        payload = as_payload(data)
        try:
            updated = await self.gateway.projects.update(payload)
            project = parse_model(Project, unwrap(updated, "project"), "update_project")
        except GatewayError as e:
            self._record_failure("update_project", e, project_id=payload.get("id"))
            return None
        if project.id in self.state.projects:
            self.state.projects = {**self.state.projects, project.id: project}
        if self.state.current_project and self.state.current_project.id == project.id:
            self.state.current_project = project
        self._record_success()
        return project

    async def delete_project(self, project_id: ProjectId) -> bool:
        try:
            await self.gateway.projects.delete(project_id)
        except GatewayError as e:
            self._record_failure("delete_project", e, project_id=project_id)
            return False
        self._purge_project(project_id)
        self._record_success()
        return True

    def _purge_project(self, project_id: ProjectId) -> None:
        state = self.state
        doomed_tasks = [t.id for t in state.tasks.values() if t.project_id == project_id]
        cards = {
            cid: c for cid, c in state.cards.items() if c.project_id != project_id
        }
        state.projects = {
            pid: p for pid, p in state.projects.items() if pid != project_id
        }
        state.tasks = {
            tid: t for tid, t in state.tasks.items() if t.project_id != project_id
        }
        state.cards = remove_tasks(cards, doomed_tasks)
        if state.current_project and state.current_project.id == project_id:
            state.current_project = None
        if state.project_report and state.project_report.project_id == project_id:
            state.project_report = None
        if state.tasks_project_id == project_id:
            state.tasks_project_id = None

    # --- Membership ----------------------------------------------------------

    async def fetch_project_users(self, project_id: ProjectId) -> list[User]:
        try:
            data = await self.gateway.projects.list_members(project_id)
            users = parse_models(User, data, "users", "fetch_project_users")
        except GatewayError as e:
            self._record_failure("fetch_project_users", e, project_id=project_id)
            return []
        self.state.users = {u.id: u for u in users}
        self._record_success()
        return users

    async def assign_project_member(
        self, project_id: ProjectId, user_id: UserId, permissions: Any = None,
    ) -> Any:
        try:
            result = await self.gateway.projects.assign_member(
                project_id, user_id, permissions,
            )
        except GatewayError as e:
            self._record_failure(
                "assign_project_member", e, project_id=project_id, user_id=user_id,
            )
            return None
        self._record_success()
        return result if result is not None else {"user_id": user_id}

    async def update_member_permissions(
        self, project_id: ProjectId, user_id: UserId, permissions: Any,
    ) -> Any:
        try:
            result = await self.gateway.projects.update_member_permissions(
                project_id, user_id, permissions,
            )
        except GatewayError as e:
            self._record_failure(
                "update_member_permissions", e, project_id=project_id, user_id=user_id,
            )
            return None
        self._record_success()
        return result if result is not None else {
            "user_id": user_id, "permissions": permissions,
        }

    async def remove_project_member(
        self, project_id: ProjectId, user_id: UserId,
    ) -> bool:
        try:
            await self.gateway.projects.remove_member(project_id, user_id)
        except GatewayError as e:
            self._record_failure(
                "remove_project_member", e, project_id=project_id, user_id=user_id,
            )
            return False
        self.state.users = {
            uid: u for uid, u in self.state.users.items() if uid != user_id
        }
        self._record_success()
        return True
