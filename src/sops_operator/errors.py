"""Failure taxonomy for SopsSecret reconciliation.

Every failure the reconciler knows how to recover from derives from
:class:`ReconcileError`. They are all handled the same way: the message is
recorded on the resource status, a warning event is raised and a retry is
scheduled.
"""

from __future__ import annotations


class ReconcileError(Exception):
    """Base class for recoverable reconciliation failures."""


class DecryptionError(ReconcileError):
    """Ciphertext could not be decrypted (bad data or key unavailable)."""

    def __init__(self, name: str, message: str):
        self.name = name
        super().__init__(f"failed to decrypt {name}: {message}")


class ConflictError(ReconcileError):
    """The target object is owned by someone else or was modified concurrently."""


class StoreError(ReconcileError):
    """Transient failure reading or writing the Kubernetes API."""

    def __init__(self, message: str, status: int | None = None):
        self.status = status
        super().__init__(message)
