"""
Short Code Generation

Random base62 codes, e.g. "aZ31rb".

Design Decisions:
- Base62 alphabet [0-9a-zA-Z]: URL-safe, case-sensitive
- 6 characters: 62^6 ~ 5.6e10 combinations
- The generator does not check the store; uniqueness comes from the unique
  index on short_code and the bounded retry in URLShorteningService
"""

import secrets

BASE62_CHARS = "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
DEFAULT_CODE_LENGTH = 6


def generate_short_code(length: int = DEFAULT_CODE_LENGTH) -> str:
    """
    Generate a random short code.

    Args:
        length: Number of characters (default: 6)

    Returns:
        Random base62 string of the requested length
    """
    return "".join(secrets.choice(BASE62_CHARS) for _ in range(length))
