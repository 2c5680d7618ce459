"""Report Schemas: read-only aggregates keyed by project or user.

The metrics themselves are server-defined, so both models keep every extra
field and expose them through metrics().
"""

from tracker.core.domain_types import EntityId
from tracker.schemas.entities import WireModel


class _Report(WireModel):
    def metrics(self) -> dict:
        """Every server-provided field except the key."""
        return dict(self.model_extra or {})


class ProjectReport(_Report):
    project_id: EntityId | None = None


class UserReport(_Report):
    user_id: EntityId | None = None
