"""Domain-level exceptions.

All ledger failures are expressed as subclasses of DomainException so the
outer layers (CLI, HTTP handlers) can catch them uniformly.  Each error
carries a stable ``kind`` plus free-form ``context`` and can be rendered as
``{kind, message, context}`` via ``to_dict()``.
"""

from __future__ import annotations

from typing import Any


class DomainException(Exception):
    """Base class for all domain errors."""

    kind = "DomainError"
    retryable = False

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "message": self.message, "context": dict(self.context)}


class ValidationError(DomainException):
    """A business rule or invariant was violated."""

    kind = "ValidationError"


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""

    kind = "NotFound"


class UnknownProductError(EntityNotFoundError):
    """A line item, batch or adjustment referenced a product id that does not exist."""

    kind = "UnknownProduct"


class InsufficientStockError(DomainException):
    """Batch-aware manual deduction asked for more than is on hand.

    Raised only by the manual deduction path; order fulfillment is
    oversell-tolerant and never raises this.
    """

    kind = "InsufficientStock"


class StorageFailure(DomainException):
    """The underlying transaction could not be committed.

    Nothing from the failed unit of work is visible afterwards, so the
    caller may simply retry.
    """

    kind = "StorageFailure"
    retryable = True
