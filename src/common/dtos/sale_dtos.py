"""Data Transfer Objects for sale operations."""

from dataclasses import dataclass
from datetime import date
from enum import Enum


@dataclass(frozen=True)
class SaleIntentDTO:
    """What the caller wants a sale to look like after a create or amend."""

    product_id: int
    customer_id: int
    quantity: int
    sale_date: date | None  # None on amend keeps the recorded date


class SaleErrorKind(str, Enum):
    """Distinguishable failure kinds of a sale operation."""

    NOT_FOUND = "not_found"
    INSUFFICIENT_STOCK = "insufficient_stock"
    VALIDATION_FAILURE = "validation_failure"
    PERSISTENCE_FAILURE = "persistence_failure"
    TRANSACTION_FAILURE = "transaction_failure"


class SaleTransactionState(str, Enum):
    """Coordinator progress. COMMITTED and ROLLED_BACK are terminal."""

    STARTED = "started"
    VALIDATING = "validating"
    WRITING = "writing"
    ADJUSTING = "adjusting"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


@dataclass(frozen=True)
class SaleOperationResult:
    """Outcome of a create, amend or delete sale operation."""

    operation: str
    state: SaleTransactionState
    sale_id: int | None = None
    error_kind: SaleErrorKind | None = None
    message: str | None = None
    failed_at: SaleTransactionState | None = None  # Last state reached before the rollback

    @classmethod
    def committed(cls, operation: str, sale_id: int | None) -> "SaleOperationResult":
        return cls(operation=operation, state=SaleTransactionState.COMMITTED, sale_id=sale_id)

    @classmethod
    def failure(
        cls,
        operation: str,
        error_kind: SaleErrorKind,
        message: str,
        sale_id: int | None = None,
        failed_at: SaleTransactionState | None = None,
    ) -> "SaleOperationResult":
        """A failure; the state is ROLLED_BACK whether or not a transaction was opened."""
        return cls(
            operation=operation,
            state=SaleTransactionState.ROLLED_BACK,
            sale_id=sale_id,
            error_kind=error_kind,
            message=message,
            failed_at=failed_at,
        )

    @property
    def is_success(self) -> bool:
        return self.state == SaleTransactionState.COMMITTED

    def __bool__(self) -> bool:
        return self.is_success
