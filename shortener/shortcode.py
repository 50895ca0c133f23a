"""Short code generation utilities."""

import random
import string
from typing import Optional


class ShortCodeGenerator:
    """Generate random short codes for URLs.

    The generator does not know which codes are taken. Uniqueness is the
    caller's job: every candidate goes through the store's atomic
    insert-if-absent, and a conflict means "draw again".
    """

    # Base62 characters (alphanumeric, case-sensitive)
    BASE62_CHARS = string.ascii_letters + string.digits  # a-zA-Z0-9

    # Extra characters allowed in user-chosen names
    NAME_EXTRA_CHARS = "-_"

    def __init__(self, default_length: int = 6):
        """Initialize short code generator.

        Args:
            default_length: Default length for generated codes
        """
        if default_length < 1:
            raise ValueError(f"Short code length must be positive (given value: {default_length})")
        self.default_length = default_length

    def generate(self, length: Optional[int] = None) -> str:
        """Generate a random short code.

        Args:
            length: Length of the code (uses default if not specified)

        Returns:
            Random short code
        """
        length = self._resolve_length(length)
        return ''.join(random.choices(self.BASE62_CHARS, k=length))

    def capacity(self, length: Optional[int] = None) -> int:
        """Number of distinct codes of the given length."""
        length = self._resolve_length(length)
        return len(self.BASE62_CHARS) ** length

    def _resolve_length(self, length: Optional[int]) -> int:
        if length is None:
            return self.default_length
        if length < 1:
            raise ValueError(f"Short code length must be positive (given value: {length})")
        return length

    @staticmethod
    def is_valid_format(code: str) -> bool:
        """Check if code has valid format (alphanumeric, '-' or '_').

        Args:
            code: Code to validate

        Returns:
            True if valid format
        """
        allowed = ShortCodeGenerator.BASE62_CHARS + ShortCodeGenerator.NAME_EXTRA_CHARS
        return bool(code) and all(c in allowed for c in code)
