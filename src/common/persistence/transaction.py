# src/common/persistence/transaction.py
"""Transaction handle interfaces shared by all repositories."""
import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Iterator

logger = logging.getLogger(__name__)


class ITransaction(ABC):
    """
    A single unit of work on one storage connection.

    Reads issued through a transaction observe its own uncommitted writes.
    The handle is closed exactly once; closing an uncommitted transaction rolls it back.
    """

    @abstractmethod
    def cursor(self, dictionary: bool = False) -> Any:
        """Returns a cursor bound to this transaction."""
        pass

    @abstractmethod
    def commit(self) -> None:
        """Makes every write of this transaction durable."""
        pass

    @abstractmethod
    def rollback(self) -> None:
        """Discards every write of this transaction."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Releases the underlying connection."""
        pass

    @property
    @abstractmethod
    def is_active(self) -> bool:
        """True while the transaction is open and neither committed nor rolled back."""
        pass


class ITransactionManager(ABC):

    @abstractmethod
    def begin(self) -> ITransaction:
        """Opens a new transaction on a dedicated connection."""
        pass

    @contextmanager
    def transaction(self) -> Iterator[ITransaction]:
        """Commits on clean exit, rolls back if the block raises, always closes."""
        tx = self.begin()
        try:
            yield tx
            tx.commit()
        except BaseException:
            if tx.is_active:
                try:
                    tx.rollback()
                except Exception as rollback_error:
                    # Propagate the error that aborted the block, not this one
                    logger.error(f"Rollback failed: {rollback_error}")
            raise
        finally:
            tx.close()
