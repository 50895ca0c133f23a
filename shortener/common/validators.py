"""Validation utilities for URL shortener."""

import re
from urllib.parse import urlparse
from typing import Tuple

MAX_URL_LENGTH = 2048

SHORT_CODE_PATTERN = re.compile(r'^[a-zA-Z0-9_-]+$')

# RFC 3986 unreserved, reserved and percent characters; the target is sent
# back verbatim in the Location header
URL_CHARS_PATTERN = re.compile(r"^[A-Za-z0-9\-._~:/?#\[\]@!$&'()*+,;=%]+$")

# Names that would shadow routes of the service
RESERVED_WORDS = {
    "api", "urls", "healthz", "health", "metrics", "docs", "redoc",
    "openapi", "admin", "static", "favicon",
}


def is_valid_url(url: str) -> Tuple[bool, str]:
    """Validate a URL.

    Args:
        url: The URL to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url or not isinstance(url, str):
        return False, "URL is required"

    if len(url) > MAX_URL_LENGTH:
        return False, f"URL is too long (max {MAX_URL_LENGTH} characters)"

    if any(c.isspace() for c in url):
        return False, "URL must not contain whitespace"

    if not URL_CHARS_PATTERN.match(url):
        return False, "URL contains characters that must be percent-encoded"

    try:
        result = urlparse(url)
        # Accessing port validates it (raises ValueError when out of range)
        result.port
    except ValueError as e:
        return False, f"Invalid URL format: {e}"

    if result.scheme not in ("http", "https"):
        return False, "URL must use http or https protocol"

    if not result.hostname:
        return False, "URL must have a valid domain"

    return True, ""


def is_valid_short_code(short_code: str, min_length: int = 4, max_length: int = 20) -> Tuple[bool, str]:
    """Validate a user-chosen short code.

    Args:
        short_code: The short code to validate
        min_length: Minimum length for short code
        max_length: Maximum length for short code

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not short_code or not isinstance(short_code, str):
        return False, "Short code is required"

    if len(short_code) < min_length:
        return False, f"Short code must be at least {min_length} characters"

    if len(short_code) > max_length:
        return False, f"Short code must be at most {max_length} characters"

    if not SHORT_CODE_PATTERN.match(short_code):
        return False, "Short code can only contain letters, numbers, hyphens, and underscores"

    if short_code.lower() in RESERVED_WORDS:
        return False, f"'{short_code}' is a reserved word and cannot be used"

    return True, ""
