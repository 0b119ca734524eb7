"""Utilities for emitting Kubernetes events."""

from __future__ import annotations

from typing import Any, Protocol

import kopf

from ..constants import EVENT_REASON_PROCESSING_ERROR, EVENT_TYPE_NORMAL, EVENT_TYPE_WARNING
from .errors import capitalize_first


class EventEmitter(Protocol):
    """Fire-and-forget sink for user-visible events."""

    def emit(self, resource: dict[str, Any], type_: str, reason: str, message: str) -> None:
        ...


class KopfEventRecorder:
    """Post events through kopf, which attaches them to the involved object."""

    def emit(self, resource: dict[str, Any], type_: str, reason: str, message: str) -> None:
        """Emit a Kubernetes event.

        Args:
            resource: Body of the involved object
            type_: Event type (Normal or Warning)
            reason: Event reason
            message: Event message
        """
        kopf.event(
            resource,
            type=type_,
            reason=reason,
            message=message,
        )


def emit_processing_error(recorder: EventEmitter, resource: dict[str, Any], message: str) -> None:
    """Emit a warning for a failed reconciliation or status write."""
    recorder.emit(resource, EVENT_TYPE_WARNING, EVENT_REASON_PROCESSING_ERROR, capitalize_first(message))


def emit_apply_result(recorder: EventEmitter, resource: dict[str, Any], result: str) -> None:
    """Emit a normal event naming the apply result, e.g. ``Created secret: db-creds``."""
    op_result = capitalize_first(result)
    name = resource.get("metadata", {}).get("name", "")
    recorder.emit(resource, EVENT_TYPE_NORMAL, op_result, f"{op_result} secret: {name}")
