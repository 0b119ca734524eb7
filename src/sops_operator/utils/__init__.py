"""Utility functions for the SOPS Operator."""

from .backoff import next_retry_delay
from .errors import capitalize_first, sanitize_exception
from .events import KopfEventRecorder, emit_apply_result, emit_processing_error
from .ownership import ensure_controlled_by, is_controlled_by, set_controller_reference
from .status import build_status, get_previous_status, record_status

__all__ = [
    "next_retry_delay",
    "capitalize_first",
    "sanitize_exception",
    "KopfEventRecorder",
    "emit_apply_result",
    "emit_processing_error",
    "ensure_controlled_by",
    "is_controlled_by",
    "set_controller_reference",
    "build_status",
    "get_previous_status",
    "record_status",
]
