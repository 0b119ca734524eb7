"""Decryptor backed by the sops command line tool."""

from __future__ import annotations

import logging
import subprocess
import time
from pathlib import PurePosixPath

from ... import metrics
from ...errors import DecryptionError
from ...tracing import trace_span
from ...utils.errors import sanitize_error_message

logger = logging.getLogger(__name__)

_FORMATS_BY_SUFFIX = {
    ".yaml": "yaml",
    ".yml": "yaml",
    ".json": "json",
    ".env": "dotenv",
    ".ini": "ini",
}


def format_for_name(name: str) -> str:
    """Return the sops document format for a logical entry name."""
    return _FORMATS_BY_SUFFIX.get(PurePosixPath(name).suffix.lower(), "binary")


class SopsDecryptor:
    """Decrypt SOPS documents by piping them through ``sops --decrypt``."""

    def __init__(self, binary: str = "sops", timeout: float = 30.0):
        self.binary = binary
        self.timeout = timeout

    def _command(self, name: str) -> list[str]:
        fmt = format_for_name(name)
        return [
            self.binary,
            "--decrypt",
            "--input-type",
            fmt,
            "--output-type",
            fmt,
            "/dev/stdin",
        ]

    def decrypt(self, name: str, ciphertext: str) -> bytes:
        """Decrypt one entry, raising DecryptionError on any failure."""
        start_time = time.time()
        with trace_span("sops_decrypt", attributes={"sops.entry": name, "sops.format": format_for_name(name)}):
            try:
                completed = subprocess.run(
                    self._command(name),
                    input=ciphertext.encode("utf-8"),
                    capture_output=True,
                    timeout=self.timeout,
                    check=False,
                )
            except subprocess.TimeoutExpired as e:
                metrics.decrypt_total.labels(result="timeout").inc()
                raise DecryptionError(name, f"sops timed out after {self.timeout:g}s") from e
            except OSError as e:
                metrics.decrypt_total.labels(result="error").inc()
                raise DecryptionError(name, f"unable to run {self.binary}: {e}") from e
            finally:
                logger.debug(f"sops decrypt of {name} took {time.time() - start_time:.3f}s")

            if completed.returncode != 0:
                metrics.decrypt_total.labels(result="failed").inc()
                stderr = completed.stderr.decode("utf-8", errors="replace").strip()
                detail = sanitize_error_message(stderr) or f"sops exited with code {completed.returncode}"
                raise DecryptionError(name, detail)

        metrics.decrypt_total.labels(result="success").inc()
        return completed.stdout
