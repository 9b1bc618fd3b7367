"""
Business logic for shortening, redirecting and listing links.

Services receive an async session and never touch HTTP concerns.
"""
