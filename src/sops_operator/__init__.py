"""Kubernetes operator that turns SopsSecret resources into decrypted Secrets."""

__version__ = "0.1.0"
