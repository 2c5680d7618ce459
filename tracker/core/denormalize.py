"""Denormalization Engine: keeps each card's embedded task list aligned with the task collection.

Invariants:
    - Every function is PURE: takes a cards dict, returns a new cards dict
    - Input dicts and Card instances are never mutated; changed cards are copied
    - A task appears at most once across all embedded lists after any rule runs
    - Embedded tasks are copies of the normalized task (overwrite, never merge)
    - move_task removes from the previous card and inserts into the new one in
      the same returned dict, so the store swaps both halves in one assignment

Design Decisions:
    - Previous membership is looked up by the prior card_id, not by scanning
    - In-place replacement scans every card: a project holds a handful of cards
"""

from collections.abc import Iterable, Mapping

from tracker.core.domain_types import EntityId
from tracker.schemas.entities import Card, Task

Cards = Mapping[EntityId, Card]


def _with_tasks(card: Card, tasks: list[Task]) -> Card:
    return card.model_copy(update={"tasks": tasks})


def _upsert(tasks: list[Task], task: Task) -> list[Task]:
    """Replace the entry with task.id at its position, or append."""
    snapshot = task.model_copy()
    result = []
    replaced = False
    for existing in tasks:
        if existing.id == task.id:
            if not replaced:
                result.append(snapshot)
                replaced = True
        else:
            result.append(existing)
    if not replaced:
        result.append(snapshot)
    return result


def _without(tasks: list[Task], task_id: EntityId) -> list[Task]:
    return [t for t in tasks if t.id != task_id]


def find_listing_card(cards: Cards, task_id: EntityId) -> EntityId | None:
    """Id of the first card whose embedded list contains task_id."""
    for card_id, card in cards.items():
        if any(t.id == task_id for t in card.tasks):
            return card_id
    return None


def embed_task(cards: Cards, task: Task) -> dict[EntityId, Card]:
    """Insert a newly created task into its card, if it has one."""
    updated = dict(cards)
    if task.card_id is not None and task.card_id in updated:
        target = updated[task.card_id]
        updated[task.card_id] = _with_tasks(target, _upsert(target.tasks, task))
    return updated


def move_task(
    cards: Cards, task: Task, previous_card_id: EntityId | None,
) -> dict[EntityId, Card]:
    """Remove task from previous_card_id's list, then list it under task.card_id."""
    updated = dict(cards)
    if (
        previous_card_id is not None
        and previous_card_id != task.card_id
        and previous_card_id in updated
    ):
        source = updated[previous_card_id]
        updated[previous_card_id] = _with_tasks(source, _without(source.tasks, task.id))
    if task.card_id is not None and task.card_id in updated:
        target = updated[task.card_id]
        updated[task.card_id] = _with_tasks(target, _upsert(target.tasks, task))
    return updated


def replace_embedded_task(cards: Cards, task: Task) -> dict[EntityId, Card]:
    """Overwrite the embedded copy of task wherever its id is listed."""
    updated = dict(cards)
    for card_id, card in cards.items():
        if any(t.id == task.id for t in card.tasks):
            updated[card_id] = _with_tasks(card, _upsert(card.tasks, task))
    return updated


def apply_task(
    cards: Cards, task: Task, previous_card_id: EntityId | None,
) -> dict[EntityId, Card]:
    """Project a changed task into the card view.

    Same card: overwrite in place. Different card: move.
    """
    if previous_card_id == task.card_id:
        if task.card_id is not None and task.card_id in cards and not any(
            t.id == task.id for t in cards[task.card_id].tasks
        ):
            return embed_task(cards, task)
        return replace_embedded_task(cards, task)
    return move_task(cards, task, previous_card_id)


def remove_task(cards: Cards, task_id: EntityId) -> dict[EntityId, Card]:
    """Drop task_id from every embedded list."""
    updated = dict(cards)
    for card_id, card in cards.items():
        if any(t.id == task_id for t in card.tasks):
            updated[card_id] = _with_tasks(card, _without(card.tasks, task_id))
    return updated


def remove_tasks(cards: Cards, task_ids: Iterable[EntityId]) -> dict[EntityId, Card]:
    doomed = set(task_ids)
    if not doomed:
        return dict(cards)
    updated = dict(cards)
    for card_id, card in cards.items():
        if any(t.id in doomed for t in card.tasks):
            updated[card_id] = _with_tasks(
                card, [t for t in card.tasks if t.id not in doomed],
            )
    return updated


def rebuild_card_tasks(
    cards: Cards, tasks: Mapping[EntityId, Task],
    project_id: EntityId | None = None,
) -> dict[EntityId, Card]:
    """Recompute embedded lists from the normalized tasks.

    Limited to cards of project_id when given (cards with no project_id are
    included). Tasks already listed keep their embedded order; newly listed
    tasks follow in normalized order.
    """
    updated = dict(cards)
    for card_id, card in cards.items():
        if project_id is not None and card.project_id not in (project_id, None):
            continue
        order = {t.id: i for i, t in enumerate(card.tasks)}
        members = [t for t in tasks.values() if t.card_id == card_id]
        members.sort(key=lambda t: (t.id not in order, order.get(t.id, 0)))
        updated[card_id] = _with_tasks(card, [t.model_copy() for t in members])
    return updated


def membership_violations(
    cards: Cards, tasks: Mapping[EntityId, Task],
) -> list[dict]:
    """List every disagreement between task.card_id and the embedded lists."""
    violations: list[dict] = []
    listed: dict[EntityId, list[EntityId]] = {}
    for card_id, card in cards.items():
        for embedded in card.tasks:
            listed.setdefault(embedded.id, []).append(card_id)

    for task_id, card_ids in listed.items():
        if len(card_ids) > 1:
            violations.append({
                "task_id": task_id, "card_ids": card_ids,
                "reason": "listed_more_than_once",
            })
        task = tasks.get(task_id)
        if task is None:
            continue
        for card_id in card_ids:
            if task.card_id != card_id:
                violations.append({
                    "task_id": task_id, "card_ids": [card_id],
                    "reason": "listed_under_wrong_card",
                })

    for task_id, task in tasks.items():
        if task.card_id is None or task.card_id not in cards:
            continue
        if task.card_id not in listed.get(task_id, []):
            violations.append({
                "task_id": task_id, "card_ids": [task.card_id],
                "reason": "missing_from_card",
            })
    return violations
