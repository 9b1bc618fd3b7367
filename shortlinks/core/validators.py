"""
Input Validators and Sanitizers

This module provides validation and sanitization functions for user inputs.

Security Considerations:
- Input validation prevents injection attacks
- Length limits prevent oversized lookups
"""

import re
from typing import Any, Optional

from shortlinks.core.exceptions import ValidationError

SHORT_CODE_PATTERN = re.compile(r'[0-9a-zA-Z]+')
MAX_SHORT_CODE_LENGTH = 20


def sanitize_short_code(short_code: str) -> Optional[str]:
    """
    Validate short code format.

    Short codes must consist only of base62 characters: [0-9a-zA-Z].
    The code is checked as given; surrounding whitespace makes it invalid.

    Args:
        short_code: The short code to sanitize

    Returns:
        The short code if valid, None otherwise
    """
    if not short_code or not isinstance(short_code, str):
        return None

    if len(short_code) > MAX_SHORT_CODE_LENGTH:
        return None

    if not SHORT_CODE_PATTERN.fullmatch(short_code):
        return None

    return short_code


def require_original_url(value: Any) -> str:
    """
    Check that a shorten request carries a usable originalUrl.

    Raises:
        ValidationError: If the value is missing, empty or not a string
    """
    if not value or not isinstance(value, str):
        raise ValidationError("originalUrl is required")
    return value
