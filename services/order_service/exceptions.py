from typing import Dict, Optional


class OrderError(Exception):
    """Base class for order service failures."""


class ValidationError(OrderError):
    """Caller input rejected. Always a client error, never retried."""

    def __init__(self, message: str, errors: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or {}


class UniqueConstraintViolation(OrderError):
    """The store rejected an insert because an identifier is already taken."""

    def __init__(self, field: str):
        super().__init__(f"duplicate value for {field}")
        self.field = field


class NotFoundError(OrderError):
    """No order matches the given tracking number."""


class PersistenceError(OrderError):
    """The store is unavailable or the write could not be completed."""
