"""Domain errors raised by the inventory services."""
from __future__ import annotations


class ERPError(Exception):
    """Base class for erpdesk errors."""

    error_code = "erp_error"

    def __init__(self, message: str = "An application error occurred") -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(ERPError):
    """A referenced record does not exist for the team."""

    error_code = "not_found"

    def __init__(self, entity: str, entity_id: object) -> None:
        super().__init__(f"{entity} not found")
        self.entity = entity
        self.entity_id = entity_id


class InsufficientStockError(ERPError):
    error_code = "insufficient_stock"

    def __init__(self, current: int, requested: int) -> None:
        super().__init__("Insufficient stock quantity")
        self.current = current
        self.requested = requested


class ConflictError(ERPError):
    """The write would break a per-team uniqueness rule."""

    error_code = "conflict"
