"""Main entry point for the SOPS Operator.

Run with ``kopf run -m sops_operator.main``.
"""

from __future__ import annotations

import logging
from typing import Any

import kopf

from . import handlers  # noqa: F401
from . import health
from . import logging as structured_logging
from .config import OperatorConfig
from .handlers.sopssecret import SopsSecretHandler
from .services.k8s import SecretStore, get_api_client
from .services.sops import SopsDecryptor
from .tracing import initialize_tracing
from .utils.events import KopfEventRecorder
from .utils.progress import SpecAwareProgressStorage

logger = logging.getLogger(__name__)


def build_sops_secret_handler(config: OperatorConfig) -> SopsSecretHandler:
    """Wire the SopsSecret handler to its store, decryptor and event recorder."""
    return SopsSecretHandler(
        store=SecretStore(get_api_client()),
        decryptor=SopsDecryptor(binary=config.sops_binary, timeout=config.sops_timeout_seconds),
        recorder=KopfEventRecorder(),
        logger=logging.getLogger("sops_operator.handlers.sopssecret"),
    )


@kopf.on.startup()
def configure(settings: kopf.OperatorSettings, memo: kopf.Memo, **_: Any) -> None:
    """Configure the operator."""
    config = OperatorConfig.from_env()

    # Set up structured JSON logging
    structured_logging.setup_structured_logging(config.log_level)
    initialize_tracing()

    # Keep kopf's progress out of .status, which this operator owns.
    # Spec changes must interrupt a pending retry delay.
    settings.persistence.progress_storage = SpecAwareProgressStorage()
    settings.persistence.diffbase_storage = kopf.AnnotationsDiffBaseStorage()

    # Only kopf's own warnings become k8s events; ours are posted explicitly
    settings.posting.level = logging.WARNING
    settings.networking.request_timeout = config.request_timeout
    settings.execution.max_workers = config.max_workers

    memo.sops_secret_handler = build_sops_secret_handler(config)

    readiness = health.ReadinessState()
    memo.readiness = readiness
    health.start_health_server(config.metrics_port, readiness)
    readiness.mark_ready()
    logger.info(f"SOPS operator started, metrics on port {config.metrics_port}")


@kopf.on.cleanup()
def shutdown(memo: kopf.Memo, **_: Any) -> None:
    """Report not-ready while the operator is stopping."""
    readiness = getattr(memo, "readiness", None)
    if readiness is not None:
        readiness.mark_not_ready()
    logger.info("SOPS operator stopping")
