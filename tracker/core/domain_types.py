"""Domain Types: identifier aliases and enums shared across the codebase.

Invariants:
    - Identifiers are opaque and server-assigned (int or str); never minted client side
    - Durable storage keys are encoded once here, no raw string keys elsewhere
    - All valid states encoded as Enums

Design Decisions:
    - Type aliases over NewType: ids arrive as either int or str depending on backend
    - str Enums: serialize to JSON and log extras without custom encoders
"""

from enum import Enum
from typing import TypeAlias


# ─── Identity Types ──────────────────────────────────────────────

EntityId: TypeAlias = int | str

ProjectId: TypeAlias = EntityId
TaskId: TypeAlias = EntityId
CardId: TypeAlias = EntityId
UserId: TypeAlias = EntityId
CommentId: TypeAlias = EntityId


# ─── Enums ───────────────────────────────────────────────────────

class StorageKey(str, Enum):
    """The three keys that make up the entire on-disk session contract."""
    TOKEN = "token"
    LOGGED_IN = "loggedIn"
    USER_ID = "user_id"


class ResourceFamily(str, Enum):
    """Gateway capability groups. Used as the prefix of operation names in logs."""
    PROJECTS = "projects"
    TASKS = "tasks"
    CARDS = "cards"
    COMMENTS = "comments"
    REPORTS = "reports"
    AUTH = "auth"
    USERS = "users"


class MembershipChange(str, Enum):
    """How a task's card membership changed in one store operation."""
    NONE = "none"
    ASSIGNED = "assigned"
    MOVED = "moved"
    UNASSIGNED = "unassigned"


def classify_membership_change(
    previous_card_id: EntityId | None, card_id: EntityId | None,
) -> MembershipChange:
    """Name the membership transition between two card ids."""
    if previous_card_id == card_id:
        return MembershipChange.NONE
    if previous_card_id is None:
        return MembershipChange.ASSIGNED
    if card_id is None:
        return MembershipChange.UNASSIGNED
    return MembershipChange.MOVED
