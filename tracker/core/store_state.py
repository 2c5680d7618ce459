"""Store State: the normalized in-memory projection of server state.

Invariants:
    - Each collection is a dict keyed by entity id (arena-by-id), insertion ordered
    - Collections are replaced by single assignment, never patched across an await
    - tasks_project_id names the project whose tasks are currently loaded (or None)
    - reset() leaves no entity, report or error behind

Design Decisions:
    - In-memory dicts, no persistence: the auth token is the only durable state
    - One explicitly owned object per client, no module-level store
"""

from dataclasses import dataclass, field

from tracker.core.domain_types import EntityId
from tracker.core.errors import TrackerError
from tracker.schemas.entities import Card, Project, Task, User
from tracker.schemas.reports import ProjectReport, UserReport


@dataclass
class StoreState:
    """Normalized collections. Pure dataclass, no IO."""

    projects: dict[EntityId, Project] = field(default_factory=dict)
    tasks: dict[EntityId, Task] = field(default_factory=dict)
    cards: dict[EntityId, Card] = field(default_factory=dict)
    users: dict[EntityId, User] = field(default_factory=dict)

    current_project: Project | None = None
    project_report: ProjectReport | None = None
    user_report: UserReport | None = None

    # Project whose task list was last fetched; gates card-list rebuilds
    tasks_project_id: EntityId | None = None

    # Most recent swallowed failure, cleared by the next successful operation
    last_error: TrackerError | None = None

    @property
    def is_empty(self) -> bool:
        return not (
            self.projects or self.tasks or self.cards or self.users
            or self.current_project or self.project_report or self.user_report
        )

    def tasks_loaded_for(self, project_id: EntityId | None) -> bool:
        return project_id is not None and self.tasks_project_id == project_id

    def reset(self) -> None:
        """Wipe every collection. Invoked on logout."""
        self.projects = {}
        self.tasks = {}
        self.cards = {}
        self.users = {}
        self.current_project = None
        self.project_report = None
        self.user_report = None
        self.tasks_project_id = None
        self.last_error = None
