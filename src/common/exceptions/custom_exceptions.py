"""Custom application-wide exceptions."""


class ApplicationError(Exception):
    """Base class for application-specific errors."""

    def __init__(
        self, message: str = "An application error occurred", original_exception: Exception | None = None
    ) -> None:
        super().__init__(message)
        self.original_exception = original_exception
        self.message = message

    def __str__(self) -> str:
        if self.original_exception:
            return f"{self.message} (Original error: {self.original_exception})"
        return self.message


class DatabaseError(ApplicationError):
    """Exception raised for errors during database operations."""

    def __init__(self, message: str = "Database operation failed", original_exception: Exception | None = None) -> None:
        super().__init__(message, original_exception)
        self.message = f"Database Error: {message}"


class TransactionError(DatabaseError):
    """Exception raised when starting, committing or rolling back a transaction fails."""

    def __init__(self, message: str = "Transaction failed", original_exception: Exception | None = None) -> None:
        super().__init__(message, original_exception)
        self.message = f"Transaction Error: {message}"


class ValidationError(ApplicationError):
    """Exception raised for malformed input or input violating a storage constraint."""

    def __init__(self, message: str = "Validation failed", original_exception: Exception | None = None) -> None:
        super().__init__(message, original_exception)
        self.message = f"Validation Error: {message}"


class NotFoundError(ApplicationError):
    """Exception raised when a referenced product, customer or sale does not exist."""

    def __init__(
        self, entity: str, entity_id: int | str, original_exception: Exception | None = None
    ) -> None:
        super().__init__(f"{entity} {entity_id} not found", original_exception)
        self.entity = entity
        self.entity_id = entity_id
