"""Kubernetes object store adapter."""

from .store import SecretStore, get_api_client

__all__ = ["SecretStore", "get_api_client"]
