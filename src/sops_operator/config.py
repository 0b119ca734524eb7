"""
Configuration for the SOPS Operator.

Loaded from environment variables at operator startup.
"""

import os
from dataclasses import dataclass


@dataclass
class OperatorConfig:
    """Runtime configuration of the operator process."""

    log_level: str = "INFO"
    metrics_port: int = 8080
    max_workers: int = 4
    request_timeout: float = 30.0
    sops_binary: str = "sops"
    sops_timeout_seconds: float = 30.0

    @classmethod
    def from_env(cls):
        """Load from environment variables."""
        config = cls(
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            metrics_port=int(os.getenv("METRICS_PORT", "8080")),
            max_workers=int(os.getenv("MAX_WORKERS", "4")),
            request_timeout=float(os.getenv("REQUEST_TIMEOUT", "30")),
            sops_binary=os.getenv("SOPS_BINARY", "sops"),
            sops_timeout_seconds=float(os.getenv("SOPS_TIMEOUT_SECONDS", "30")),
        )
        config.validate()
        return config

    def validate(self) -> None:
        """Reject values the operator cannot start with."""
        if not 0 < self.metrics_port < 65536:
            raise ValueError(f"METRICS_PORT must be between 1 and 65535, got {self.metrics_port}")
        if self.max_workers < 1:
            raise ValueError(f"MAX_WORKERS must be at least 1, got {self.max_workers}")
        if self.sops_timeout_seconds <= 0:
            raise ValueError("SOPS_TIMEOUT_SECONDS must be positive")
        if not self.sops_binary:
            raise ValueError("SOPS_BINARY must not be empty")
