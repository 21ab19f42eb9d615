# src/common/persistence/mysql_transaction.py
"""MySQL implementation of transaction handles."""

import logging

import mysql.connector
from mysql.connector import Error
from mysql.connector.constants import ClientFlag

from src.common.config.settings import settings
from src.common.exceptions.custom_exceptions import DatabaseError, TransactionError
from src.common.persistence.transaction import ITransaction, ITransactionManager

logger = logging.getLogger(__name__)


class MySQLTransaction(ITransaction):
    """Wraps one MySQL connection for the lifetime of one transaction."""

    def __init__(self, connection) -> None:
        self._connection = connection
        self._active = True

    def cursor(self, dictionary: bool = False):
        if not self._active:
            raise TransactionError("Cursor requested on a finished transaction")
        return self._connection.cursor(dictionary=dictionary)

    def commit(self) -> None:
        try:
            self._connection.commit()
        except Error as e:
            raise TransactionError(f"Commit failed: {e}", original_exception=e)
        finally:
            self._active = False

    def rollback(self) -> None:
        try:
            self._connection.rollback()
        except Error as e:
            raise TransactionError(f"Rollback failed: {e}", original_exception=e)
        finally:
            self._active = False

    def close(self) -> None:
        """Rolls back anything left open and closes the connection."""
        try:
            if self._active and self._connection.is_connected():
                self._connection.rollback()
        except Error as e:
            logger.error(f"Rollback on close failed: {e}")
        finally:
            self._active = False
            try:
                self._connection.close()
            except Error as e:
                logger.error(f"Error closing MySQL connection: {e}")

    @property
    def is_active(self) -> bool:
        return self._active


class MySQLTransactionManager(ITransactionManager):
    """Opens a dedicated MySQL connection for every transaction."""

    def begin(self) -> MySQLTransaction:
        try:
            connection = mysql.connector.connect(
                host=settings.DB_HOST,
                port=settings.DB_PORT,
                database=settings.DB_DATABASE,
                user=settings.DB_USER,
                password=settings.DB_PASSWORD,
                autocommit=False,
                charset="utf8mb4",
                use_unicode=True,
                # rowcount of an UPDATE counts matched rows, not only changed ones
                client_flags=[ClientFlag.FOUND_ROWS],
            )
        except Error as e:
            raise DatabaseError(f"Failed to connect to MySQL: {e}", original_exception=e)

        try:
            connection.start_transaction()
        except Error as e:
            connection.close()
            raise TransactionError(f"Failed to start transaction: {e}", original_exception=e)
        return MySQLTransaction(connection)
