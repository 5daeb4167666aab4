"""Typed errors raised by the category taxonomy service.

Services raise these; the HTTP layer maps them to responses in
carmarket.exception_handlers. Each carries the status code it surfaces as.
"""

from typing import Optional


class CarMarketError(Exception):
    """Base class for errors that are reported back to the caller."""

    status_code: int = 500

    def __init__(self, message: str, field: Optional[str] = None):
        self.message = message
        self.field = field
        super().__init__(message)


class ValidationError(CarMarketError):
    """Malformed or structurally invalid input."""

    status_code = 400


class AuthenticationError(CarMarketError):
    """Missing or invalid credentials."""

    status_code = 401

    def __init__(self, message: str = "Could not validate credentials"):
        super().__init__(message)


class AuthorizationError(CarMarketError):
    """The actor is authenticated but lacks the required role."""

    status_code = 403


class NotFoundError(CarMarketError):
    """A referenced category (or its parent) does not exist."""

    status_code = 404


class ConflictError(CarMarketError):
    """The write would duplicate an existing category."""

    status_code = 409
