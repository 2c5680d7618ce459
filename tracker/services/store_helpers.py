"""Store Helpers: shared base for per-family operations and payload decoding.

Invariants:
    - Every swallowed GatewayError is logged once and stored on state.last_error
    - A successful operation clears state.last_error
    - Payload decoding failures surface as PayloadError (a GatewayError)
    - commit_task is the single place a changed task enters the store

Design Decisions:
    - Base class over module functions: operations share gateway + state context
"""

import logging
from collections.abc import Iterable
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from tracker.core.denormalize import apply_task, find_listing_card
from tracker.core.domain_types import classify_membership_change
from tracker.core.errors import ErrorContext, GatewayError, PayloadError
from tracker.core.gateway_protocols import Gateway
from tracker.core.store_state import StoreState
from tracker.schemas.entities import Task

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

_LOGGED_IDS = frozenset({
    "project_id", "task_id", "card_id", "user_id", "comment_id",
})


def as_payload(data: Any) -> dict:
    """Caller input (dict or model) as a plain dict for the gateway."""
    if isinstance(data, BaseModel):
        return data.model_dump(exclude_none=True)
    return dict(data)


def unwrap(data: Any, key: str) -> Any:
    """Accept both a bare payload and one wrapped as {key: payload}."""
    if isinstance(data, dict) and isinstance(data.get(key), dict):
        return data[key]
    return data


def unwrap_list(data: Any, key: str) -> list | None:
    """Accept a bare list or {key: [...]}; anything else is None."""
    if isinstance(data, list):
        return data
    if isinstance(data, dict) and isinstance(data.get(key), list):
        return data[key]
    return None


def parse_model(model: type[M], data: Any, operation: str) -> M:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise PayloadError(
            f"{operation} returned an invalid {model.__name__}: {e.error_count()} error(s)",
            context=ErrorContext(operation=operation, debug_info={"errors": e.errors()}),
        ) from e


def parse_models(
    model: type[M], data: Any, key: str, operation: str,
) -> list[M]:
    items = unwrap_list(data, key)
    if items is None:
        logger.error(
            f"Unexpected {key} payload shape: {type(data).__name__}",
            extra={"operation": operation},
        )
        raise PayloadError(
            f"{operation} returned neither a list nor {{'{key}': [...]}}",
            context=ErrorContext(operation=operation),
        )
    return [parse_model(model, item, operation) for item in items]


def parse_models_with_defaults(
    model: type[M], data: Any, key: str, operation: str, defaults: dict,
) -> list[M]:
    """Like parse_models, filling fields the server omitted."""
    items = unwrap_list(data, key)
    if items is None:
        return parse_models(model, data, key, operation)
    filled: Iterable[Any] = (
        {**defaults, **{k: v for k, v in item.items() if v is not None}}
        if isinstance(item, dict) else item
        for item in items
    )
    return [parse_model(model, item, operation) for item in filled]


class StoreOperations:
    """Shared context for one resource family's operations."""

    def __init__(self, gateway: Gateway, state: StoreState):
        self.gateway = gateway
        self.state = state

    def _record_failure(
        self, operation: str, error: GatewayError, **ids: Any,
    ) -> None:
        error.context.operation = error.context.operation or operation
        error.context.resource_ids.update(ids)
        self.state.last_error = error
        logger.warning(
            f"{operation} failed: {error.message}",
            extra={
                "operation": operation,
                "error_code": error.code,
                "status_code": error.status_code,
                **{k: v for k, v in ids.items() if k in _LOGGED_IDS},
            },
        )

    def _record_success(self) -> None:
        self.state.last_error = None

    def commit_task(self, task: Task, insert: bool = False) -> None:
        """Write a server-confirmed task into the collection and the card view.

        The previous card is taken from the cached task's card_id. For an
        uncached task the listing card is found by scanning. Both collections
        are reassigned with no await in between.
        """
        cached = self.state.tasks.get(task.id)
        if cached is not None:
            previous_card_id = cached.card_id
        else:
            previous_card_id = find_listing_card(self.state.cards, task.id)

        tasks = self.state.tasks
        if cached is not None or insert:
            tasks = dict(tasks)
            tasks[task.id] = task
        cards = apply_task(self.state.cards, task, previous_card_id)

        self.state.tasks = tasks
        self.state.cards = cards
        logger.debug(
            "Task committed",
            extra={
                "task_id": task.id,
                "card_id": task.card_id,
                "step": classify_membership_change(previous_card_id, task.card_id).value,
            },
        )

