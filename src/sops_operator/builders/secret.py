"""Builder for the managed Secret of a SopsSecret."""

from __future__ import annotations

import base64
from typing import Any

from ..errors import DecryptionError
from ..services.sops.base import Decryptor


def build_desired_secret(sops_secret: dict[str, Any], decryptor: Decryptor) -> dict[str, Any]:
    """Decrypt a SopsSecret spec into the desired Secret contents.

    Every ``stringData`` entry is decrypted before anything is returned, so a
    single failing entry aborts the whole build.

    The plaintext is base64-encoded into the ``data`` bytes, and those bytes
    are base64-encoded once more when written to the API. Existing consumers
    read the doubly encoded value.

    Args:
        sops_secret: SopsSecret body
        decryptor: Decryption capability

    Returns:
        Dict with ``labels``, ``annotations``, ``type`` and ``data`` (name -> bytes)

    Raises:
        DecryptionError: If any entry cannot be decrypted
    """
    spec = sops_secret.get("spec") or {}
    metadata = spec.get("metadata") or {}

    data: dict[str, bytes] = {}
    for name, ciphertext in (spec.get("stringData") or {}).items():
        if not isinstance(ciphertext, str):
            raise DecryptionError(name, "encrypted value must be a string")
        plaintext = decryptor.decrypt(name, ciphertext)
        data[name] = base64.b64encode(plaintext)

    return {
        "labels": dict(metadata.get("labels") or {}),
        "annotations": dict(metadata.get("annotations") or {}),
        "type": spec.get("type") or "",
        "data": data,
    }


def _set_or_clear(target: dict[str, Any], key: str, value: dict[str, Any]) -> None:
    # The API omits empty maps, so store "empty" as "absent" to keep comparisons stable
    if value:
        target[key] = value
    else:
        target.pop(key, None)


def apply_desired_secret(secret: dict[str, Any], desired: dict[str, Any]) -> None:
    """Write desired contents into a Secret body (API wire form) in place.

    Labels, annotations and data are replaced wholesale. The type is only
    touched when one is requested.
    """
    metadata = secret.setdefault("metadata", {})
    _set_or_clear(metadata, "labels", desired["labels"])
    _set_or_clear(metadata, "annotations", desired["annotations"])
    _set_or_clear(
        secret,
        "data",
        {name: base64.b64encode(value).decode("ascii") for name, value in desired["data"].items()},
    )
    if desired["type"]:
        secret["type"] = desired["type"]
