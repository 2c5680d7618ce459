"""Entity Schemas: Project, Card, Task, Comment, User and membership as sent by the server.

Invariants:
    - Card.tasks is an ordered list of Task snapshots (the denormalized view)
    - Task.card_id None means the task is listed in no card
    - Extra server fields survive validation (extra="allow")
    - Instances are replaced, never mutated in place, by the store

Design Decisions:
    - One WireModel base carrying the shared model_config
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from tracker.core.domain_types import EntityId


class WireModel(BaseModel):
    """Base for every model decoded from a gateway payload."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class Project(WireModel):
    id: EntityId
    name: str = ""
    description: str | None = None


class Task(WireModel):
    id: EntityId
    project_id: EntityId | None = None
    card_id: EntityId | None = None
    title: str = ""
    description: str | None = None
    status: str | None = None
    priority: str | int | None = None
    assigned_user_id: EntityId | None = None


class Card(WireModel):
    id: EntityId
    project_id: EntityId | None = None
    name: str | None = None
    position: int | None = None
    tasks: list[Task] = Field(default_factory=list)

    def task_ids(self) -> list[EntityId]:
        """Ids of embedded tasks, in display order."""
        return [t.id for t in self.tasks]


class Comment(WireModel):
    id: EntityId
    task_id: EntityId | None = None
    content: str = ""


class User(WireModel):
    id: EntityId
    name: str | None = None
    email: str | None = None


class MemberAssignment(BaseModel):
    """One user/permission pair requested while creating a project."""
    user_id: EntityId
    permissions: Any = None
