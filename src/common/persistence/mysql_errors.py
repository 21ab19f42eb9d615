# src/common/persistence/mysql_errors.py
"""Translation of MySQL driver errors into application exceptions."""

from mysql.connector import Error, errorcode

from src.common.config.settings import settings
from src.common.exceptions.custom_exceptions import (
    ApplicationError,
    DatabaseError,
    ValidationError,
)

ER_CHECK_CONSTRAINT_VIOLATED = 3819

# Errors caused by the data sent, not by the database itself
CONSTRAINT_ERRNOS = {
    errorcode.ER_DATA_TOO_LONG,
    errorcode.ER_WARN_DATA_OUT_OF_RANGE,
    errorcode.ER_TRUNCATED_WRONG_VALUE_FOR_FIELD,
    errorcode.ER_DUP_ENTRY,
    errorcode.ER_ROW_IS_REFERENCED_2,
    errorcode.ER_NO_REFERENCED_ROW_2,
    errorcode.ER_BAD_NULL_ERROR,
    ER_CHECK_CONSTRAINT_VIOLATED,
}


def to_application_error(message: str, e: Error) -> ApplicationError:
    """Maps constraint violations to ValidationError and everything else to DatabaseError."""
    if getattr(e, "errno", None) in CONSTRAINT_ERRNOS:
        return ValidationError(message, original_exception=e)
    return DatabaseError(message, original_exception=e)


def table_name(name: str) -> str:
    return f"{settings.TABLE_PREFIX}{name}"
