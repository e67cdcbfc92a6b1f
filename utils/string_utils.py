from __future__ import annotations

import hashlib
import unicodedata
from typing import Final

__all__: list[str] = ["StringUtils"]

MESSAGE_HASH_LENGTH: Final[int] = 16  # Number of hex digits kept from the SHA-256 digest.


class StringUtils:
    """Utility class for string manipulation shared by the translation layers."""

    @staticmethod
    def ensure_str(value: str | None) -> str:
        """Ensure that the value is a string, returning an empty string if None.

        Note: Does not use strip() to preserve significant whitespace.

        Args:
            value (str | None): The value to ensure as a string.

        Returns:
            str: The value as a string, or empty string if None.
        """
        if not isinstance(value, str):
            value = str(value) if value is not None else ""
        return value

    @staticmethod
    def normalize_text(text: str) -> str:
        """Normalize text using Unicode NFC normalization.

        Args:
            text (str): Text to normalize.

        Returns:
            str: Normalized text.
        """
        return unicodedata.normalize("NFC", text)

    @staticmethod
    def text_digest(text: str, length: int = MESSAGE_HASH_LENGTH) -> str:
        """Return a shortened SHA-256 hex digest of the NFC-normalized text.

        Args:
            text (str): Text to hash.
            length (int): Number of hex digits to keep. Non-positive keeps the full digest.

        Returns:
            str: Hex digest.
        """
        digest: str = hashlib.sha256(StringUtils.normalize_text(text).encode("utf-8")).hexdigest()
        if length <= 0:
            return digest
        return digest[:length]

    @staticmethod
    def clean_language_code(value: str | None) -> str:
        """Reduce a free-form model answer to a bare, lower-case language code.

        Examples:
            '"ES".' -> 'es'
            ' fr\\n' -> 'fr'

        Args:
            value (str | None): Raw response text.

        Returns:
            str: Cleaned code, possibly empty.
        """
        value = StringUtils.ensure_str(value).strip().lower()
        return value.strip("\"'`.,;: \t\r\n")
