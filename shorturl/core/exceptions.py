"""
Custom Exceptions

This module defines the error taxonomy of the shortener core.
Services raise these; the API layer maps them to HTTP responses.
"""

from typing import Optional


class URLShortenerException(Exception):
    """Base exception for URL shortener service."""
    pass


class InvalidURLError(URLShortenerException):
    """Raised when URL validation fails."""

    def __init__(self, url: str, reason: str = "invalid URL"):
        self.url = url
        self.reason = reason
        super().__init__(reason)


class InvalidCodeError(URLShortenerException):
    """Raised when a code string does not parse to a positive integer."""

    def __init__(self, raw_code: str):
        self.raw_code = raw_code
        super().__init__(f"Invalid short code: '{raw_code}'")


class CodeNotFoundError(URLShortenerException):
    """Raised when a code has no registered entry."""

    def __init__(self, code: int):
        self.code = code
        super().__init__(f"Short code {code} not found")


class DuplicateCodeError(URLShortenerException):
    """Raised when a code is registered twice."""

    def __init__(self, code: int):
        self.code = code
        super().__init__(f"Short code {code} is already registered")


class StorageUnavailableError(URLShortenerException):
    """Raised when the database cannot be reached or a transaction fails."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.original_error = original_error
        super().__init__(f"Storage unavailable: {message}")
