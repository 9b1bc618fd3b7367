"""
Custom Exceptions

Error taxonomy shared by the service layer and the HTTP layer:
- ValidationError: caller-correctable input problems (HTTP 400)
- NotFoundError: unknown short code (HTTP 404)
- StoreError: persistence failures, opaque to callers (HTTP 500)
"""

from typing import Optional


class URLShortenerException(Exception):
    """Base exception for URL shortener service."""
    pass


class ValidationError(URLShortenerException):
    """Raised when a shorten request carries missing or malformed input."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(URLShortenerException):
    """Raised when a short code is not found in the database."""

    def __init__(self, short_code: str):
        self.short_code = short_code
        super().__init__(f"Short code '{short_code}' not found")


class StoreError(URLShortenerException):
    """Raised when database operations fail."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.original_error = original_error
        super().__init__(f"Database error: {message}")


class ShortCodeExhaustedError(StoreError):
    """Raised when every generated short code collided with an existing one."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"no unique short code found after {attempts} attempts")
