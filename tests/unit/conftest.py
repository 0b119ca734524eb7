"""Shared fixtures for unit tests."""

from __future__ import annotations

import base64
from datetime import datetime, timezone
from typing import Any
from unittest.mock import Mock

import pytest
from kubernetes.client.exceptions import ApiException

from sops_operator.errors import DecryptionError
from sops_operator.services.k8s.store import SecretStore


class FakeDecryptor:
    """Decryptor that maps ciphertext to plaintext and fails on request."""

    def __init__(self, plaintexts: dict[str, bytes] | None = None, failures: dict[str, str] | None = None):
        self.plaintexts = plaintexts or {}
        self.failures = failures or {}
        self.calls: list[str] = []

    def decrypt(self, name: str, ciphertext: str) -> bytes:
        self.calls.append(name)
        if name in self.failures:
            raise DecryptionError(name, self.failures[name])
        return self.plaintexts.get(ciphertext, ciphertext.encode("utf-8"))


class RecordingEmitter:
    """Event emitter that keeps every event in memory."""

    def __init__(self):
        self.events: list[tuple[str, str, str]] = []

    def emit(self, resource: dict[str, Any], type_: str, reason: str, message: str) -> None:
        self.events.append((type_, reason, message))


def b64(value: bytes) -> str:
    return base64.b64encode(value).decode("ascii")


@pytest.fixture
def sops_secret() -> dict[str, Any]:
    """A SopsSecret with a single encrypted entry."""
    return {
        "apiVersion": "craftypath.github.io/v1alpha1",
        "kind": "SopsSecret",
        "metadata": {
            "name": "app-secrets",
            "namespace": "default",
            "uid": "sops-uid-1234",
            "generation": 1,
        },
        "spec": {
            "metadata": {
                "labels": {"app": "demo"},
                "annotations": {"team": "platform"},
            },
            "stringData": {"a.txt": "ENC[ciphertext-X]"},
        },
    }


@pytest.fixture
def decryptor() -> FakeDecryptor:
    return FakeDecryptor(plaintexts={"ENC[ciphertext-X]": b"hello"})


@pytest.fixture
def emitter() -> RecordingEmitter:
    return RecordingEmitter()


@pytest.fixture
def core_api() -> Mock:
    """CoreV1Api mock where no Secret exists yet."""
    api = Mock()
    api.read_namespaced_secret.side_effect = ApiException(status=404, reason="Not Found")
    return api


@pytest.fixture
def custom_api() -> Mock:
    return Mock()


@pytest.fixture
def store(core_api: Mock, custom_api: Mock) -> SecretStore:
    """SecretStore whose API client passes plain dicts through unchanged."""
    api_client = Mock()
    api_client.sanitize_for_serialization.side_effect = lambda obj: obj
    return SecretStore(api_client, core_api=core_api, custom_api=custom_api)


@pytest.fixture
def now() -> datetime:
    return datetime(2026, 10, 18, 12, 0, 10, 400000, tzinfo=timezone.utc)
