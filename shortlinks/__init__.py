"""URL shortening service: short codes, redirects and click tracking."""

__version__ = "1.0.0"
