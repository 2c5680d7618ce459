"""Card Operations: card CRUD and the three task-to-card membership changes.

Invariants:
    - assign_task_to_card / remove_task_from_card / update_task_card each, in one
      logical step, set the task's card_id, drop it from the previous card's list
      (looked up by the prior card_id) and append it to the new card's list
    - update_card replaces the card's own fields and keeps its embedded list
    - delete_card never deletes tasks; their card_id is left dangling
    - fetch_cards rebuilds embedded lists from the tasks when that project's tasks are loaded
"""

import logging
from collections.abc import Awaitable
from typing import Any

from tracker.core.denormalize import rebuild_card_tasks
from tracker.core.domain_types import CardId, ProjectId, TaskId
from tracker.core.errors import GatewayError
from tracker.schemas.entities import Card, Task
from tracker.services.store_helpers import (
    StoreOperations,
    as_payload,
    parse_model,
    parse_models_with_defaults,
    unwrap,
)

logger = logging.getLogger(__name__)


class CardOperations(StoreOperations):
    """Card CRUD and membership changes."""

    async def fetch_cards(self, project_id: ProjectId) -> list[Card]:
        try:
            data = await self.gateway.cards.list_by_project(project_id)
            cards = parse_models_with_defaults(
                Card, data, "cards", "fetch_cards", {"project_id": project_id},
            )
        except GatewayError as e:
            self._record_failure("fetch_cards", e, project_id=project_id)
            return []
        by_id = {c.id: c for c in cards}
        if self.state.tasks_loaded_for(project_id):
            by_id = rebuild_card_tasks(by_id, self.state.tasks, project_id)
        self.state.cards = by_id
        self._record_success()
        return list(by_id.values())

    async def fetch_card(self, card_id: CardId) -> Card | None:
        """Stateless read: the cached collection is not touched."""
        try:
            data = await self.gateway.cards.get(card_id)
            card = parse_model(Card, unwrap(data, "card"), "fetch_card")
        except GatewayError as e:
            self._record_failure("fetch_card", e, card_id=card_id)
            return None
        self._record_success()
        return card

    async def create_card(self, project_id: ProjectId, data: Any) -> Card | None:
        payload = as_payload(data)
        try:
            created = await self.gateway.cards.create(project_id, payload)
            raw = unwrap(created, "card")
            if isinstance(raw, dict) and raw.get("project_id") is None:
                raw = {**raw, "project_id": project_id}
            card = parse_model(Card, raw, "create_card")
        except GatewayError as e:
            self._record_failure("create_card", e, project_id=project_id)
            return None
        self.state.cards = {**self.state.cards, card.id: card}
        self._record_success()
        return card

    async def update_card(self, data: Any) -> Card | None:
        payload = as_payload(data)
        payload.pop("tasks", None)
        card_id = payload.get("id")
        try:
            updated = await self.gateway.cards.update(payload)
            card = parse_model(Card, unwrap(updated, "card"), "update_card")
        except GatewayError as e:
            self._record_failure("update_card", e, card_id=card_id)
            return None
        cached = self.state.cards.get(card.id)
        if cached is not None:
            card = card.model_copy(update={
                "tasks": cached.tasks,
                "project_id": card.project_id if card.project_id is not None
                else cached.project_id,
            })
            self.state.cards = {**self.state.cards, card.id: card}
        self._record_success()
        return card

    async def delete_card(self, card_id: CardId) -> bool:
        try:
            await self.gateway.cards.delete(card_id)
        except GatewayError as e:
            self._record_failure("delete_card", e, card_id=card_id)
            return False
        self.state.cards = {
            cid: c for cid, c in self.state.cards.items() if cid != card_id
        }
        self._record_success()
        return True

    # --- Membership ----------------------------------------------------------

    async def assign_task_to_card(self, card_id: CardId, task_id: TaskId) -> Task | None:
        return await self._apply_membership(
            "assign_task_to_card", self.gateway.cards.assign_task(card_id, task_id),
            task_id, card_id, log_card_id=card_id,
        )

    async def remove_task_from_card(
        self, card_id: CardId, task_id: TaskId,
    ) -> Task | None:
        return await self._apply_membership(
            "remove_task_from_card", self.gateway.cards.remove_task(card_id, task_id),
            task_id, None, log_card_id=card_id,
        )

    async def update_task_card(
        self, task_id: TaskId, card_id: CardId | None,
    ) -> Task | None:
        return await self._apply_membership(
            "update_task_card", self.gateway.tasks.patch_card(task_id, card_id),
            task_id, card_id, log_card_id=card_id,
        )

    async def _apply_membership(
        self, operation: str, call: Awaitable[Any], task_id: TaskId,
        card_id: CardId | None, log_card_id: CardId | None,
    ) -> Task | None:
        """Commit the server's answer to a membership change.

        Membership endpoints may answer with {"task": ...}, a bare task, or no
        body at all. With no body the cached task is moved; an uncached task
        leaves the store untouched and a stub is returned.
        """
        try:
            data = await call
            raw = unwrap(data, "task")
            task = (
                parse_model(Task, raw, operation)
                if isinstance(raw, dict) and "id" in raw else None
            )
        except GatewayError as e:
            self._record_failure(operation, e, card_id=log_card_id, task_id=task_id)
            return None

        if task is None:
            cached = self.state.tasks.get(task_id)
            if cached is None:
                logger.debug(
                    "Membership response carried no task and the task is not cached",
                    extra={"operation": operation, "task_id": task_id, "card_id": card_id},
                )
                self._record_success()
                return Task(id=task_id, card_id=card_id)
            task = cached.model_copy(update={"card_id": card_id})

        self.commit_task(task)
        self._record_success()
        return task
