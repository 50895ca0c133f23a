"""Exceptions raised by the URL shortener core.

Every error carries an ``error_code`` (used as the metrics label) and the
``status_code`` the HTTP layer answers with.
"""


class ShortenerError(Exception):
    """Base exception for all URL shortener errors."""

    error_code = "shortener"
    status_code = 500


class InvalidURLError(ShortenerError):
    """Raised when the URL to shorten is malformed or uses an unsupported scheme."""

    error_code = "validation"
    status_code = 400


class InvalidShortCodeError(ShortenerError):
    """Raised when a requested name cannot be used as a short code."""

    error_code = "validation"
    status_code = 400


class ShortCodeTakenError(ShortenerError):
    """Raised when a requested name is already mapped to a URL."""

    error_code = "duplicate_key"
    status_code = 409


class ShortCodeNotFoundError(ShortenerError):
    """Raised when a short code has no mapping."""

    error_code = "not_found"
    status_code = 404


class CapacityExhaustedError(ShortenerError):
    """Raised when no free short code was found within the retry budget."""

    error_code = "capacity"
    status_code = 500


class DataStoreError(ShortenerError):
    """Raised when the backing store fails (connection issues, timeouts, etc.)."""

    error_code = "database"
    status_code = 500
