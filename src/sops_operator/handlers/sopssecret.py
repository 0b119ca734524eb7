"""Handler for SopsSecret CRD."""

from __future__ import annotations

import copy
import logging
from datetime import datetime, timezone
from typing import Any, Callable

import kopf

from .. import metrics
from ..builders.secret import apply_desired_secret, build_desired_secret
from ..constants import (
    API_GROUP_VERSION,
    FAST_RETRY_DELAY,
    KIND_SOPS_SECRET,
    STATUS_FAILURE,
    STATUS_SUCCESS,
)
from ..errors import ReconcileError
from ..services.sops.base import Decryptor
from ..tracing import set_span_status, trace_span
from ..utils.backoff import next_retry_delay
from ..utils.errors import sanitize_exception
from ..utils.events import EventEmitter, emit_apply_result, emit_processing_error
from ..utils.ownership import ensure_controlled_by, set_controller_reference
from ..utils.status import DEFAULT_FAILURE_REASON, get_previous_status, record_status
from .base import BaseHandler, ReconcileResult

STATUS_UPDATE_FAILED_MESSAGE = "Unable to update status"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SopsSecretHandler(BaseHandler):
    """Reconciles a SopsSecret into a Secret of the same name."""

    def __init__(
        self,
        store: Any,
        decryptor: Decryptor,
        recorder: EventEmitter,
        logger: logging.Logger | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        """Initialize SopsSecret handler.

        Args:
            store: Object store (see ``services.k8s.SecretStore``)
            decryptor: Decryption capability
            recorder: Event sink for user-visible notifications
            logger: Logger for structured records
            clock: Source of the current time, in UTC
        """
        super().__init__(KIND_SOPS_SECRET, logger or logging.getLogger(__name__))
        self.store = store
        self.decryptor = decryptor
        self.recorder = recorder
        self.clock = clock

    def apply(self, sops_secret: dict[str, Any]) -> str:
        """Create or update the managed Secret.

        Returns:
            "created", "updated" or "unchanged"

        Raises:
            ReconcileError: On ownership conflicts, decryption or API failures
        """
        meta = sops_secret.get("metadata", {})

        def mutate(secret: dict[str, Any]) -> None:
            ensure_controlled_by(secret, sops_secret)
            desired = build_desired_secret(sops_secret, self.decryptor)
            apply_desired_secret(secret, desired)
            set_controller_reference(secret, sops_secret)

        return self.store.create_or_update_secret(meta.get("namespace"), meta.get("name"), mutate)

    def reconcile(self, sops_secret: dict[str, Any]) -> ReconcileResult:
        """Reconcile one SopsSecret and report when it wants to be retried."""
        meta = sops_secret.get("metadata", {})
        self.log_info(meta, "Reconciling SopsSecret", event="reconcile", reason="Reconciling")

        with trace_span(
            "reconcile_sops_secret",
            kind=KIND_SOPS_SECRET,
            attributes={"sopssecret.name": meta.get("name", ""), "sopssecret.namespace": meta.get("namespace", "")},
        ):
            try:
                result = self.apply(sops_secret)
            except ReconcileError as e:
                set_span_status(False, type(e).__name__)
                return self.manage_error(sops_secret, e)

            set_span_status(True)
            return self.manage_success(sops_secret, result)

    def manage_error(self, sops_secret: dict[str, Any], error: ReconcileError) -> ReconcileResult:
        """Record a failure and schedule the retry."""
        meta = sops_secret.get("metadata", {})
        message = sanitize_exception(error) or DEFAULT_FAILURE_REASON

        self.log_error(meta, "Reconciliation failed", error=error, reason="ProcessingError")
        metrics.error_total.labels(kind=self.kind, error_type=type(error).__name__).inc()
        emit_processing_error(self.recorder, sops_secret, message)

        last_update, last_status = get_previous_status(sops_secret)
        now = self.clock()
        try:
            record_status(self.store, sops_secret, STATUS_FAILURE, message, now)
        except ReconcileError as e:
            return self._status_update_failed(sops_secret, e)

        delay = next_retry_delay(last_update, last_status, now)
        metrics.requeue_delay_seconds.observe(delay.total_seconds())
        self.log_info(
            meta,
            f"Retrying in {delay.total_seconds():g}s",
            event="requeue",
            reason="Backoff",
            delay_seconds=delay.total_seconds(),
        )
        return ReconcileResult(requeue=True, after=delay, message=message)

    def manage_success(self, sops_secret: dict[str, Any], result: str) -> ReconcileResult:
        """Record a successful apply."""
        meta = sops_secret.get("metadata", {})
        try:
            record_status(self.store, sops_secret, STATUS_SUCCESS, "", self.clock())
        except ReconcileError as e:
            return self._status_update_failed(sops_secret, e)

        emit_apply_result(self.recorder, sops_secret, result)
        self.log_info(meta, f"Secret {result}", event="applied", reason="Success", result=result)
        return ReconcileResult()

    def _status_update_failed(self, sops_secret: dict[str, Any], error: ReconcileError) -> ReconcileResult:
        # No backoff without a persisted status to derive it from
        meta = sops_secret.get("metadata", {})
        self.log_error(meta, "Unable to update status", error=error, reason="StatusUpdateFailed")
        metrics.status_update_failures_total.inc()
        emit_processing_error(self.recorder, sops_secret, STATUS_UPDATE_FAILED_MESSAGE)
        metrics.requeue_delay_seconds.observe(FAST_RETRY_DELAY.total_seconds())
        return ReconcileResult(requeue=True, after=FAST_RETRY_DELAY, message=STATUS_UPDATE_FAILED_MESSAGE)


@kopf.on.create(API_GROUP_VERSION, KIND_SOPS_SECRET)
@kopf.on.update(API_GROUP_VERSION, KIND_SOPS_SECRET)
@kopf.on.resume(API_GROUP_VERSION, KIND_SOPS_SECRET)
def handle_sops_secret(
    body: kopf.Body,
    memo: kopf.Memo,
    **kwargs: Any,
) -> None:
    """Handle SopsSecret resource reconciliation."""
    handler: SopsSecretHandler = memo.sops_secret_handler
    sops_secret = copy.deepcopy(dict(body))
    meta = sops_secret.get("metadata", {})

    result = handler.reconcile_with_metrics(meta, lambda: handler.reconcile(sops_secret))
    if result.requeue:
        delay = result.after.total_seconds() if result.after is not None else FAST_RETRY_DELAY.total_seconds()
        raise kopf.TemporaryError(result.message, delay=delay)
