# src/sales_domain/application/sale_transaction_coordinator.py
"""Atomic sale lifecycle: every sale write commits or rolls back together with its stock adjustment."""

import logging
from dataclasses import dataclass, replace
from typing import Callable

from src.catalog_domain.domain.repositories.product_repository import IProductRepository
from src.common.dtos.sale_dtos import (
    SaleErrorKind,
    SaleIntentDTO,
    SaleOperationResult,
    SaleTransactionState,
)
from src.common.exceptions.custom_exceptions import (
    DatabaseError,
    TransactionError,
    ValidationError,
)
from src.common.persistence.transaction import ITransaction, ITransactionManager
from src.sales_domain.domain.entities.sale import Sale, compute_total
from src.sales_domain.domain.repositories.sale_repository import ISaleRepository
from src.sales_domain.domain.services.inventory_ledger import InventoryLedger

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _StepResult:
    """What the steps inside an open transaction produced, before commit or rollback."""

    sale_id: int | None = None
    error_kind: SaleErrorKind | None = None
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.error_kind is None


def _fail(error_kind: SaleErrorKind, message: str, sale_id: int | None = None) -> _StepResult:
    return _StepResult(sale_id=sale_id, error_kind=error_kind, message=message)


class _Progress:
    """Tracks the coordinator state of one operation."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        self.state = SaleTransactionState.STARTED

    def enter(self, state: SaleTransactionState) -> None:
        logger.debug(f"{self.operation} sale: {self.state.value} -> {state.value}")
        self.state = state


Steps = Callable[[ITransaction, _Progress], _StepResult]


class SaleTransactionCoordinator:
    """
    Orchestrates create, amend and delete of sales.

    Each operation runs in its own transaction acquired from the transaction manager:
    read and validate, write the sale record, adjust stock through the ledger, then
    commit. The first failure rolls everything back. Expected failures are returned
    as SaleOperationResult values and never raised; storage exceptions raised by the
    repositories are converted into failure results as well.
    """

    def __init__(
        self,
        tx_manager: ITransactionManager,
        sale_repo: ISaleRepository,
        product_repo: IProductRepository,
        ledger: InventoryLedger | None = None,
    ) -> None:
        self.tx_manager = tx_manager
        self.sale_repo = sale_repo
        self.product_repo = product_repo
        self.ledger = ledger or InventoryLedger(product_repo)

    def create_sale(self, intent: SaleIntentDTO) -> SaleOperationResult:
        """Records a new sale and consumes its quantity from the product's stock."""
        return self._run("create", lambda tx, progress: self._create_steps(tx, progress, intent))

    def amend_sale(self, sale_id: int, intent: SaleIntentDTO) -> SaleOperationResult:
        """Rewrites an existing sale and moves stock by the difference it makes."""
        return self._run("amend", lambda tx, progress: self._amend_steps(tx, progress, sale_id, intent), sale_id)

    def delete_sale(self, sale_id: int) -> SaleOperationResult:
        """Removes a sale and returns its full quantity to stock."""
        return self._run("delete", lambda tx, progress: self._delete_steps(tx, progress, sale_id), sale_id)

    def _run(self, operation: str, steps: Steps, sale_id: int | None = None) -> SaleOperationResult:
        """Owns the transaction boundary: begin, run the steps, commit or roll back, always close."""
        try:
            tx = self.tx_manager.begin()
        except DatabaseError as e:
            logger.error(f"Could not open a transaction to {operation} sale: {e}")
            kind = SaleErrorKind.PERSISTENCE_FAILURE
            if isinstance(e, TransactionError):
                kind = SaleErrorKind.TRANSACTION_FAILURE
            return SaleOperationResult.failure(operation, kind, str(e), sale_id, SaleTransactionState.STARTED)

        progress = _Progress(operation)
        try:
            step_result = self._run_steps(steps, tx, progress)
            if step_result.ok:
                return self._commit(tx, operation, step_result.sale_id, progress)
            return self._rollback(tx, operation, step_result, progress)
        finally:
            tx.close()

    @staticmethod
    def _run_steps(steps: Steps, tx: ITransaction, progress: _Progress) -> _StepResult:
        try:
            return steps(tx, progress)
        except ValidationError as e:
            return _fail(SaleErrorKind.VALIDATION_FAILURE, str(e))
        except TransactionError as e:
            return _fail(SaleErrorKind.TRANSACTION_FAILURE, str(e))
        except DatabaseError as e:
            return _fail(SaleErrorKind.PERSISTENCE_FAILURE, str(e))

    @staticmethod
    def _commit(tx: ITransaction, operation: str, sale_id: int | None, progress: _Progress) -> SaleOperationResult:
        try:
            tx.commit()
        except TransactionError as e:
            logger.error(f"Commit of {operation} sale {sale_id} failed: {e}")
            failed_at = progress.state
            progress.enter(SaleTransactionState.ROLLED_BACK)
            return SaleOperationResult.failure(operation, SaleErrorKind.TRANSACTION_FAILURE, str(e), sale_id, failed_at)
        progress.enter(SaleTransactionState.COMMITTED)
        logger.info(f"Sale {sale_id} {operation} committed.")
        return SaleOperationResult.committed(operation, sale_id)

    @staticmethod
    def _rollback(
        tx: ITransaction, operation: str, step_result: _StepResult, progress: _Progress
    ) -> SaleOperationResult:
        failed_at = progress.state
        error_kind = step_result.error_kind
        message = step_result.message
        try:
            tx.rollback()
        except TransactionError as e:
            logger.error(f"Rollback of {operation} sale failed: {e}")
            error_kind = SaleErrorKind.TRANSACTION_FAILURE
            message = f"{message}; {e}"
        progress.enter(SaleTransactionState.ROLLED_BACK)
        logger.warning(
            f"{operation.capitalize()} sale rolled back while {failed_at.value} ({error_kind.value}): {message}"
        )
        return SaleOperationResult.failure(operation, error_kind, message, step_result.sale_id, failed_at)

    def _create_steps(self, tx: ITransaction, progress: _Progress, intent: SaleIntentDTO) -> _StepResult:
        progress.enter(SaleTransactionState.VALIDATING)
        product = self.product_repo.get_product_by_id(tx, intent.product_id)
        if product is None:
            return _fail(SaleErrorKind.INSUFFICIENT_STOCK, f"Product {intent.product_id} not found")
        if product.stock < intent.quantity:
            return _fail(
                SaleErrorKind.INSUFFICIENT_STOCK,
                f"Insufficient stock for product {product.product_id}: "
                f"requested {intent.quantity}, available {product.stock}",
            )
        try:
            sale = Sale(
                product_id=intent.product_id,
                customer_id=intent.customer_id,
                quantity=intent.quantity,
                unit_price_at_sale=product.price,
                sale_date=intent.sale_date,
            )
        except ValueError as e:
            return _fail(SaleErrorKind.VALIDATION_FAILURE, str(e))

        progress.enter(SaleTransactionState.WRITING)
        sale_id = self.sale_repo.add_sale(tx, sale)
        if sale_id is None:
            return _fail(SaleErrorKind.PERSISTENCE_FAILURE, "Sale insert affected no rows")

        progress.enter(SaleTransactionState.ADJUSTING)
        outcome = self.ledger.apply_delta(tx, intent.product_id, -intent.quantity)
        if not outcome.is_success:
            return _fail(
                SaleErrorKind.PERSISTENCE_FAILURE,
                f"Stock adjustment for product {intent.product_id} rejected: {outcome.value}",
                sale_id,
            )
        return _StepResult(sale_id=sale_id)

    def _amend_steps(self, tx: ITransaction, progress: _Progress, sale_id: int, intent: SaleIntentDTO) -> _StepResult:
        progress.enter(SaleTransactionState.VALIDATING)
        old_sale = self.sale_repo.get_sale_by_id(tx, sale_id)
        if old_sale is None:
            return _fail(SaleErrorKind.NOT_FOUND, f"Sale {sale_id} not found", sale_id)

        product_changed = intent.product_id != old_sale.product_id
        if product_changed:
            # The new product must cover the whole new quantity; the old one gets its reservation back
            adjustments = [(old_sale.product_id, old_sale.quantity), (intent.product_id, -intent.quantity)]
            required = intent.quantity
        else:
            delta = intent.quantity - old_sale.quantity
            adjustments = [(intent.product_id, -delta)] if delta != 0 else []
            required = delta

        product = self.product_repo.get_product_by_id(tx, intent.product_id)
        if product is None:
            return _fail(SaleErrorKind.INSUFFICIENT_STOCK, f"Product {intent.product_id} not found", sale_id)
        if required > 0 and not self.ledger.check_availability(tx, intent.product_id, required):
            return _fail(
                SaleErrorKind.INSUFFICIENT_STOCK,
                f"Insufficient stock for product {intent.product_id}: need {required} more, available {product.stock}",
                sale_id,
            )

        unit_price = product.price if product_changed else old_sale.unit_price_at_sale
        try:
            new_sale = replace(
                old_sale,
                product_id=intent.product_id,
                customer_id=intent.customer_id,
                quantity=intent.quantity,
                unit_price_at_sale=unit_price,
                total_sale_price=compute_total(unit_price, intent.quantity),
                sale_date=intent.sale_date or old_sale.sale_date,
            )
        except ValueError as e:
            return _fail(SaleErrorKind.VALIDATION_FAILURE, str(e), sale_id)

        progress.enter(SaleTransactionState.WRITING)
        if not self.sale_repo.update_sale(tx, new_sale):
            return _fail(SaleErrorKind.PERSISTENCE_FAILURE, f"Update of sale {sale_id} affected no rows", sale_id)

        progress.enter(SaleTransactionState.ADJUSTING)
        for product_id, stock_delta in adjustments:
            outcome = self.ledger.apply_delta(tx, product_id, stock_delta)
            if not outcome.is_success:
                return _fail(
                    SaleErrorKind.PERSISTENCE_FAILURE,
                    f"Stock adjustment for product {product_id} rejected: {outcome.value}",
                    sale_id,
                )
        return _StepResult(sale_id=sale_id)

    def _delete_steps(self, tx: ITransaction, progress: _Progress, sale_id: int) -> _StepResult:
        progress.enter(SaleTransactionState.VALIDATING)
        sale = self.sale_repo.get_sale_by_id(tx, sale_id)
        if sale is None:
            return _fail(SaleErrorKind.NOT_FOUND, f"Sale {sale_id} not found", sale_id)

        progress.enter(SaleTransactionState.WRITING)
        if not self.sale_repo.delete_sale(tx, sale_id):
            return _fail(SaleErrorKind.PERSISTENCE_FAILURE, f"Delete of sale {sale_id} affected no rows", sale_id)

        progress.enter(SaleTransactionState.ADJUSTING)
        outcome = self.ledger.apply_delta(tx, sale.product_id, sale.quantity)
        if not outcome.is_success:
            return _fail(
                SaleErrorKind.PERSISTENCE_FAILURE,
                f"Returning stock to product {sale.product_id} rejected: {outcome.value}",
                sale_id,
            )
        return _StepResult(sale_id=sale_id)
