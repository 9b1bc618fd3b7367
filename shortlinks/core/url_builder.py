"""URL building utilities for the shortlinks service."""


def build_short_url(short_code: str, base_url: str) -> str:
    """
    Build the public short URL for a code.

    Args:
        short_code: The short code
        base_url: Base address (e.g., https://sho.rt)

    Returns:
        base_url + "/" + short_code
    """
    return f"{base_url.rstrip('/')}/{short_code}"
