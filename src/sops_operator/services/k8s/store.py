"""Read and write Secrets and SopsSecret status through the Kubernetes API."""

from __future__ import annotations

import copy
import logging
import time
from typing import Any, Callable

import urllib3
from kubernetes import client, config
from kubernetes.client.exceptions import ApiException

from ... import metrics
from ...constants import (
    API_GROUP,
    API_VERSION,
    FIELD_MANAGER,
    PLURAL_SOPS_SECRETS,
    RESULT_CREATED,
    RESULT_UNCHANGED,
    RESULT_UPDATED,
)
from ...errors import ConflictError, StoreError
from ...tracing import trace_span

logger = logging.getLogger(__name__)

SecretMutation = Callable[[dict[str, Any]], None]


def get_api_client() -> client.ApiClient:
    """Build an ApiClient from in-cluster config, falling back to kubeconfig."""
    try:
        config.load_incluster_config()
    except config.ConfigException:
        config.load_kube_config()
    return client.ApiClient()


class SecretStore:
    """Thin adapter over CoreV1Api and CustomObjectsApi.

    Every Kubernetes failure leaves this class as a :class:`ConflictError`
    (HTTP 409) or a :class:`StoreError` (anything else), so callers only ever
    deal with the reconcile error taxonomy.
    """

    def __init__(
        self,
        api_client: client.ApiClient,
        core_api: client.CoreV1Api | None = None,
        custom_api: client.CustomObjectsApi | None = None,
    ):
        self.api_client = api_client
        self.core_api = core_api or client.CoreV1Api(api_client)
        self.custom_api = custom_api or client.CustomObjectsApi(api_client)

    def _call(self, operation: str, func: Callable[..., Any], **kwargs: Any) -> Any:
        start_time = time.time()
        with trace_span(f"k8s_{operation}", attributes={"k8s.operation": operation}):
            try:
                result = func(**kwargs)
                metrics.api_call_total.labels(api_type="k8s", operation=operation, result="success").inc()
                return result
            except ApiException as e:
                outcome = "not_found" if e.status == 404 else "error"
                metrics.api_call_total.labels(api_type="k8s", operation=operation, result=outcome).inc()
                if e.status == 409:
                    raise ConflictError(f"{operation} conflict: {e.reason}") from e
                raise StoreError(f"{operation} failed: {e.status} {e.reason}", status=e.status) from e
            except urllib3.exceptions.HTTPError as e:
                metrics.api_call_total.labels(api_type="k8s", operation=operation, result="error").inc()
                raise StoreError(f"{operation} failed: {e}") from e
            finally:
                duration = time.time() - start_time
                metrics.api_call_duration_seconds.labels(api_type="k8s", operation=operation).observe(duration)

    def get_secret(self, namespace: str, name: str) -> dict[str, Any] | None:
        """Return the Secret as a plain dict, or None if it does not exist."""
        try:
            secret = self._call("read_secret", self.core_api.read_namespaced_secret, name=name, namespace=namespace)
        except StoreError as e:
            if e.status == 404:
                return None
            raise
        return self.api_client.sanitize_for_serialization(secret)

    def create_or_update_secret(self, namespace: str, name: str, mutate: SecretMutation) -> str:
        """Fetch or default the Secret, apply ``mutate`` and commit if it changed.

        Args:
            namespace: Namespace of the Secret
            name: Name of the Secret
            mutate: Callback that edits the Secret body in place; may raise to abort

        Returns:
            One of RESULT_CREATED, RESULT_UPDATED, RESULT_UNCHANGED
        """
        existing = self.get_secret(namespace, name)

        if existing is None:
            body: dict[str, Any] = {
                "apiVersion": "v1",
                "kind": "Secret",
                "metadata": {"name": name, "namespace": namespace},
            }
            mutate(body)
            self._call(
                "create_secret",
                self.core_api.create_namespaced_secret,
                namespace=namespace,
                body=body,
                field_manager=FIELD_MANAGER,
            )
            metrics.secret_operations_total.labels(result=RESULT_CREATED).inc()
            return RESULT_CREATED

        body = copy.deepcopy(existing)
        mutate(body)
        if body == existing:
            metrics.secret_operations_total.labels(result=RESULT_UNCHANGED).inc()
            return RESULT_UNCHANGED

        # body still carries the resourceVersion we read, so a concurrent write yields 409
        self._call(
            "replace_secret",
            self.core_api.replace_namespaced_secret,
            name=name,
            namespace=namespace,
            body=body,
            field_manager=FIELD_MANAGER,
        )
        metrics.secret_operations_total.labels(result=RESULT_UPDATED).inc()
        return RESULT_UPDATED

    def update_status(self, resource: dict[str, Any]) -> None:
        """Persist ``resource['status']`` through the status subresource."""
        meta = resource.get("metadata", {})
        self._call(
            "update_status",
            self.custom_api.replace_namespaced_custom_object_status,
            group=API_GROUP,
            version=API_VERSION,
            namespace=meta.get("namespace"),
            plural=PLURAL_SOPS_SECRETS,
            name=meta.get("name"),
            body=resource,
        )
