"""Comment Operations: stateless pass-throughs.

Invariants:
    - Comments are never cached; StoreState has no comment collection
    - Failures follow the store policy: [] / None / False plus last_error
"""

from tracker.core.domain_types import CommentId, TaskId
from tracker.core.errors import GatewayError
from tracker.schemas.entities import Comment
from tracker.services.store_helpers import (
    StoreOperations, parse_model, parse_models_with_defaults, unwrap,
)


class CommentOperations(StoreOperations):
    """Task comments."""

    async def fetch_task_comments(self, task_id: TaskId) -> list[Comment]:
        try:
            data = await self.gateway.comments.list_by_task(task_id)
            comments = parse_models_with_defaults(
                Comment, data, "comments", "fetch_task_comments", {"task_id": task_id},
            )
        except GatewayError as e:
            self._record_failure("fetch_task_comments", e, task_id=task_id)
            return []
        self._record_success()
        return comments

    async def add_comment(self, task_id: TaskId, content: str) -> Comment | None:
        try:
            data = await self.gateway.comments.create(task_id, content)
            raw = unwrap(data, "comment")
            if isinstance(raw, dict) and raw.get("task_id") is None:
                raw = {**raw, "task_id": task_id}
            comment = parse_model(Comment, raw, "add_comment")
        except GatewayError as e:
            self._record_failure("add_comment", e, task_id=task_id)
            return None
        self._record_success()
        return comment

    async def update_comment(self, comment_id: CommentId, content: str) -> Comment | None:
        try:
            data = await self.gateway.comments.update(comment_id, content)
            comment = parse_model(Comment, unwrap(data, "comment"), "update_comment")
        except GatewayError as e:
            self._record_failure("update_comment", e, comment_id=comment_id)
            return None
        self._record_success()
        return comment

    async def delete_comment(self, comment_id: CommentId) -> bool:
        try:
            await self.gateway.comments.delete(comment_id)
        except GatewayError as e:
            self._record_failure("delete_comment", e, comment_id=comment_id)
            return False
        self._record_success()
        return True
