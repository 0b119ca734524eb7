"""SOPS decryption backend."""

from .base import Decryptor
from .decryptor import SopsDecryptor, format_for_name

__all__ = ["Decryptor", "SopsDecryptor", "format_for_name"]
