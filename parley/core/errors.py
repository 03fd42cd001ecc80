"""Error types for the Parley domain layer.

Services raise these exceptions to signal domain failures; the server maps
each of them to an HTTP status code through the handlers registered in
``parley.server.exception_handlers``.

Usage:
- Catch ``ParleyError`` for any domain failure and inspect ``status_code``.
- Raise the most specific subclass from services; never raise ``HTTPException``
  below the API layer.
"""

from __future__ import annotations


class ParleyError(Exception):
    """Base error for all Parley domain exceptions.

    Args:
        message: Human-readable error description.
    """

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidRequestError(ParleyError):
    """Raised when a request is well-formed but makes no sense (HTTP 400)."""

    status_code = 400


class AuthenticationError(ParleyError):
    """Raised when credentials or a bearer token are missing or invalid (HTTP 401)."""

    status_code = 401


class ForbiddenError(ParleyError):
    """Raised when the caller may not access a chat, group or message (HTTP 403)."""

    status_code = 403


class NotFoundError(ParleyError):
    """Raised when a referenced entity does not exist (HTTP 404).

    Args:
        entity: Entity kind, e.g. ``"User"``.
        entity_id: The identifier that was looked up.
    """

    status_code = 404

    def __init__(self, entity: str, entity_id: str) -> None:
        super().__init__(f"{entity} '{entity_id}' not found")
        self.entity = entity
        self.entity_id = entity_id


class ConflictError(ParleyError):
    """Raised when creating something that already exists (HTTP 409)."""

    status_code = 409
