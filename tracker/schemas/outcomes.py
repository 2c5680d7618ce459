"""Operation Outcomes: per-step results of best-effort multi-step operations.

Invariants:
    - A ProjectCreation exists only if the project itself was created
    - steps preserves the order in which member assignments were issued
    - A failed step never implies rollback of earlier steps
"""

from pydantic import BaseModel, Field

from tracker.core.domain_types import EntityId
from tracker.schemas.entities import Project


class StepOutcome(BaseModel):
    """Result of one member-assignment step."""
    user_id: EntityId
    ok: bool
    error_code: str | None = None
    error_message: str | None = None


class ProjectCreation(BaseModel):
    """Saga result of create_project: the project plus each membership step."""
    project: Project
    steps: list[StepOutcome] = Field(default_factory=list)

    @property
    def failed_steps(self) -> list[StepOutcome]:
        return [s for s in self.steps if not s.ok]

    @property
    def all_steps_ok(self) -> bool:
        return not self.failed_steps
