"""Directory Operations: the user list and the read-only reports."""

from tracker.core.domain_types import ProjectId, UserId
from tracker.core.errors import GatewayError
from tracker.schemas.entities import User
from tracker.schemas.reports import ProjectReport, UserReport
from tracker.services.store_helpers import StoreOperations, parse_model, parse_models, unwrap


class DirectoryOperations(StoreOperations):
    """Users and reports."""

    async def fetch_users(self) -> list[User]:
        try:
            data = await self.gateway.users.list()
            users = parse_models(User, data, "users", "fetch_users")
        except GatewayError as e:
            self._record_failure("fetch_users", e)
            return []
        self.state.users = {u.id: u for u in users}
        self._record_success()
        return users

    async def fetch_project_report(self, project_id: ProjectId) -> ProjectReport | None:
        try:
            data = await self.gateway.reports.get_by_project(project_id)
            report = parse_model(
                ProjectReport, unwrap(data, "report"), "fetch_project_report",
            )
        except GatewayError as e:
            self._record_failure("fetch_project_report", e, project_id=project_id)
            return None
        if report.project_id is None:
            report = report.model_copy(update={"project_id": project_id})
        self.state.project_report = report
        self._record_success()
        return report

    async def fetch_user_report(self, user_id: UserId) -> UserReport | None:
        try:
            data = await self.gateway.reports.get_by_user(user_id)
            report = parse_model(UserReport, unwrap(data, "report"), "fetch_user_report")
        except GatewayError as e:
            self._record_failure("fetch_user_report", e, user_id=user_id)
            return None
        if report.user_id is None:
            report = report.model_copy(update={"user_id": user_id})
        self.state.user_report = report
        self._record_success()
        return report
