"""Status bookkeeping for SopsSecret resources."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from ..constants import STATUS_FAILURE, STATUS_SUCCESS

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"
DEFAULT_FAILURE_REASON = "reconciliation failed"


def format_timestamp(value: datetime) -> str:
    """Format a datetime the way Kubernetes serializes metav1.Time (UTC, whole seconds)."""
    return value.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an RFC 3339 timestamp, returning None for missing or unreadable values."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def build_status(status: str, reason: str, now: datetime) -> dict[str, Any]:
    """Build a complete status block.

    A success never carries a reason and a failure always does.
    """
    if status == STATUS_SUCCESS:
        reason = ""
    elif status == STATUS_FAILURE and not reason:
        reason = DEFAULT_FAILURE_REASON
    return {
        "lastUpdate": format_timestamp(now),
        "reason": reason,
        "status": status,
    }


def get_previous_status(resource: dict[str, Any]) -> tuple[datetime | None, str]:
    """Return the stored (lastUpdate, status) pair of a resource."""
    status = resource.get("status") or {}
    return parse_timestamp(status.get("lastUpdate")), status.get("status", "")


def record_status(store: Any, resource: dict[str, Any], status: str, reason: str, now: datetime) -> dict[str, Any]:
    """Overwrite the resource status and persist it.

    Args:
        store: Object store exposing ``update_status(resource)``
        resource: SopsSecret body; its ``status`` is replaced in place
        status: STATUS_SUCCESS or STATUS_FAILURE
        reason: Failure message (ignored on success)
        now: Timestamp of this outcome

    Returns:
        The status block that was written

    Raises:
        StoreError: If the status write fails
    """
    new_status = build_status(status, reason, now)
    resource["status"] = new_status
    store.update_status(resource)
    return new_status
