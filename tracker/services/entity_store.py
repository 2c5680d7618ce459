"""Entity Store: single authoritative in-memory projection of server state.

Invariants:
    - Every operation is explicitly bound here; adding one requires editing this file
    - All operation classes share ONE StoreState instance; reset() clears it in place
    - Reorders are local: no gateway call, card positions are not rewritten
    - Callers read collections through the list properties, never mutate them

Design Decisions:
    - Explicit method binding over inheritance: every mapping visible in one place
    - Operations split by resource family (projects, tasks, cards, directory, comments)
"""

import logging

from tracker.core.domain_types import CardId, EntityId, UserId
from tracker.core.errors import EntityNotCachedError
from tracker.core.gateway_protocols import Gateway
from tracker.core.reorder import move_item, move_key
from tracker.core.store_state import StoreState
from tracker.schemas.entities import Card, Project, Task, User
from tracker.services.card_operations import CardOperations
from tracker.services.comment_operations import CommentOperations
from tracker.services.directory_operations import DirectoryOperations
from tracker.services.project_operations import ProjectOperations
from tracker.services.task_operations import TaskOperations

logger = logging.getLogger(__name__)


class EntityStore:
    """Normalized entity store with one method per business operation."""

    def __init__(self, gateway: Gateway, state: StoreState | None = None):
        self.state = state if state is not None else StoreState()
        projects = ProjectOperations(gateway, self.state)
        tasks = TaskOperations(gateway, self.state)
        cards = CardOperations(gateway, self.state)
        directory = DirectoryOperations(gateway, self.state)
        comments = CommentOperations(gateway, self.state)

        # Projects
        self.fetch_projects = projects.fetch_projects
        self.fetch_project = projects.fetch_project
        self.create_project = projects.create_project
        self.update_project = projects.update_project
        self.delete_project = projects.delete_project
        self.fetch_project_users = projects.fetch_project_users
        self.assign_project_member = projects.assign_project_member
        self.update_member_permissions = projects.update_member_permissions
        self.remove_project_member = projects.remove_project_member

        # Tasks
        self.fetch_tasks = tasks.fetch_tasks
        self.fetch_task = tasks.fetch_task
        self.create_task = tasks.create_task
        self.update_task = tasks.update_task
        self.update_task_status = tasks.update_task_status
        self.update_task_priority = tasks.update_task_priority
        self.update_task_assigned_user = tasks.update_task_assigned_user
        self.delete_task = tasks.delete_task

        # Cards and membership
        self.fetch_cards = cards.fetch_cards
        self.fetch_card = cards.fetch_card
        self.create_card = cards.create_card
        self.update_card = cards.update_card
        self.delete_card = cards.delete_card
        self.assign_task_to_card = cards.assign_task_to_card
        self.remove_task_from_card = cards.remove_task_from_card
        self.update_task_card = cards.update_task_card

        # Users and reports
        self.fetch_users = directory.fetch_users
        self.fetch_project_report = directory.fetch_project_report
        self.fetch_user_report = directory.fetch_user_report

        # Comments (never cached)
        self.fetch_task_comments = comments.fetch_task_comments
        self.add_comment = comments.add_comment
        self.update_comment = comments.update_comment
        self.delete_comment = comments.delete_comment

    # --- Read views ------------------------------------------------------------

    @property
    def projects(self) -> list[Project]:
        return list(self.state.projects.values())

    @property
    def tasks(self) -> list[Task]:
        return list(self.state.tasks.values())

    @property
    def cards(self) -> list[Card]:
        return list(self.state.cards.values())

    @property
    def users(self) -> list[User]:
        return list(self.state.users.values())

    def card(self, card_id: CardId) -> Card | None:
        return self.state.cards.get(card_id)

    def task(self, task_id: EntityId) -> Task | None:
        return self.state.tasks.get(task_id)

    def tasks_assigned_to(self, user_id: UserId) -> list[Task]:
        """The "my tasks" view: cached tasks assigned to user_id."""
        return [
            t for t in self.state.tasks.values()
            if t.assigned_user_id is not None and str(t.assigned_user_id) == str(user_id)
        ]

    def unlisted_tasks(self) -> list[Task]:
        """Tasks with no card, or whose card is not cached (e.g. deleted)."""
        return [
            t for t in self.state.tasks.values()
            if t.card_id is None or t.card_id not in self.state.cards
        ]

    # --- Local reorder ---------------------------------------------------------

    def reorder_cards(self, from_index: int, to_index: int) -> list[Card]:
        self.state.cards = move_key(self.state.cards, from_index, to_index)
        return self.cards

    def reorder_tasks(
        self, from_index: int, to_index: int, card_id: CardId | None = None,
    ) -> list[Task]:
        """Permute the task order, or one card's embedded list when card_id is given."""
        if card_id is None:
            self.state.tasks = move_key(self.state.tasks, from_index, to_index)
            return self.tasks
        card = self.state.cards.get(card_id)
        if card is None:
            raise EntityNotCachedError("card", card_id)
        reordered = card.model_copy(
            update={"tasks": move_item(card.tasks, from_index, to_index)},
        )
        self.state.cards = {**self.state.cards, card_id: reordered}
        return list(reordered.tasks)

    # --- Lifecycle -------------------------------------------------------------

    def reset(self) -> None:
        """Wipe every cached collection (logout)."""
        self.state.reset()
        logger.info("Entity store reset")
