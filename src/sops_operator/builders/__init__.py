"""Builders for managed resources."""

from .secret import apply_desired_secret, build_desired_secret

__all__ = ["build_desired_secret", "apply_desired_secret"]
