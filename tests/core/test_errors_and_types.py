"""Errors and Domain Types: hierarchy, envelopes and enum contracts.

Tests cover:
    - Every remote error is a GatewayError with the expected code/category
    - to_dict() envelope shape
    - StorageKey values are the on-disk contract
    - classify_membership_change names every transition
"""

import pytest

from tracker.core.domain_types import (
    MembershipChange, StorageKey, classify_membership_change,
)
from tracker.core.errors import (
    ErrorCategory,
    ErrorContext,
    GatewayError,
    InvalidReorderError,
    PayloadError,
    RemoteNotFoundError,
    RemoteServerError,
    TrackerError,
    TransportFailure,
    UnauthorizedError,
    ValidationRejectedError,
)


@pytest.mark.parametrize("error,code,category,status", [
    (TransportFailure("down"), "TRANSPORT_FAILURE", ErrorCategory.TRANSPORT, None),
    (UnauthorizedError("no"), "UNAUTHORIZED", ErrorCategory.AUTHORIZATION, 401),
    (UnauthorizedError("no", status_code=403), "UNAUTHORIZED", ErrorCategory.AUTHORIZATION, 403),
    (RemoteNotFoundError("gone"), "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND, 404),
    (ValidationRejectedError("bad"), "VALIDATION_REJECTED", ErrorCategory.VALIDATION, 422),
    (RemoteServerError("oops", 503), "REMOTE_SERVER_ERROR", ErrorCategory.REMOTE, 503),
    (PayloadError("garbled"), "MALFORMED_PAYLOAD", ErrorCategory.PAYLOAD, None),
])
def test_gateway_error_taxonomy(error, code, category, status):
    assert isinstance(error, GatewayError)
    assert isinstance(error, TrackerError)
    assert error.code == code
    assert error.category == category
    assert error.status_code == status


def test_to_dict_envelope():
    err = RemoteNotFoundError(
        "task 5 not found",
        context=ErrorContext(operation="tasks.get", resource_ids={"task_id": 5}),
    )
    body = err.to_dict()["error"]
    assert body["code"] == "RESOURCE_NOT_FOUND"
    assert body["category"] == "resource_not_found"
    assert body["operation"] == "tasks.get"
    assert body["resource_ids"] == {"task_id": 5}
    assert body["status_code"] == 404
    assert "timestamp" in body


def test_invalid_reorder_is_local_not_gateway():
    err = InvalidReorderError(5, 0, 3)
    assert not isinstance(err, GatewayError)
    assert err.category == ErrorCategory.LOCAL
    assert err.context.debug_info == {"from_index": 5, "to_index": 0, "length": 3}


def test_storage_keys_match_persisted_layout():
    assert {k.value for k in StorageKey} == {"token", "loggedIn", "user_id"}


@pytest.mark.parametrize("before,after,expected", [
    (None, None, MembershipChange.NONE),
    ("A", "A", MembershipChange.NONE),
    (None, "A", MembershipChange.ASSIGNED),
    ("A", None, MembershipChange.UNASSIGNED),
    ("A", "B", MembershipChange.MOVED),
])
def test_classify_membership_change(before, after, expected):
    assert classify_membership_change(before, after) is expected
