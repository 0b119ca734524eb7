"""Decryption capability interface."""

from __future__ import annotations

from typing import Protocol


class Decryptor(Protocol):
    """Protocol defining the decryption capability."""

    def decrypt(self, name: str, ciphertext: str) -> bytes:
        """Decrypt one ciphertext entry.

        Args:
            name: Logical name of the entry (used to pick the document format)
            ciphertext: SOPS-encrypted document

        Returns:
            Plaintext bytes

        Raises:
            DecryptionError: If the entry cannot be decrypted
        """
        ...
