# gstore/errors.py
"""
Error taxonomy shared by the store, the renderer and the web layer.

The web layer maps these onto HTTP status codes:
  ValidationError -> 400, StorageError -> 500, RateLimitError -> 429
"""
from __future__ import annotations


class ValidationError(ValueError):
    """A request body is missing a required field."""


class StorageError(RuntimeError):
    """The graph document or one of its sidecar files could not be read or written."""


class RateLimitError(RuntimeError):
    """A client exceeded its request budget for the current window."""

    def __init__(self, client_id: str, message: str = "Too many requests. Please try again later.") -> None:
        super().__init__(message)
        self.client_id = client_id
