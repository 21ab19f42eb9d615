# src/sales_domain/application/sales_service.py
"""Application service for recording, amending and querying sales."""

import logging
from datetime import date
from typing import Optional

from src.common.dtos.sale_dtos import SaleErrorKind, SaleIntentDTO, SaleOperationResult
from src.common.persistence.transaction import ITransactionManager
from src.common.utils.date_utils import parse_sale_date
from src.sales_domain.application.sale_transaction_coordinator import SaleTransactionCoordinator
from src.sales_domain.domain.entities.sale import Sale
from src.sales_domain.domain.repositories.sale_repository import ISaleRepository

logger = logging.getLogger(__name__)


class SalesApplicationService:
    """
    Boundary used by the presentation shell for everything sale related.

    Mutations go through the SaleTransactionCoordinator and return a
    SaleOperationResult; queries read committed sales in a short transaction.
    """

    def __init__(
        self,
        coordinator: SaleTransactionCoordinator,
        sale_repo: ISaleRepository,
        tx_manager: ITransactionManager,
    ) -> None:
        self.coordinator = coordinator
        self.sale_repo = sale_repo
        self.tx_manager = tx_manager

    def create_sale(
        self, product_id: int, customer_id: int, quantity: int | str, sale_date: date | str | None = None
    ) -> SaleOperationResult:
        """Records a sale at the product's current price; a missing date means today."""
        intent = self._build_intent("create", product_id, customer_id, quantity, sale_date)
        if isinstance(intent, SaleOperationResult):
            return intent
        logger.info(f"Creating sale: product={product_id}, customer={customer_id}, quantity={intent.quantity}")
        return self.coordinator.create_sale(intent)

    def amend_sale(
        self,
        sale_id: int,
        product_id: int,
        customer_id: int,
        quantity: int | str,
        sale_date: date | str | None = None,
    ) -> SaleOperationResult:
        """Amends a sale; a missing date keeps the recorded one."""
        intent = self._build_intent("amend", product_id, customer_id, quantity, sale_date, keep_date=True)
        if isinstance(intent, SaleOperationResult):
            return intent
        logger.info(
            f"Amending sale {sale_id}: product={product_id}, customer={customer_id}, quantity={intent.quantity}"
        )
        return self.coordinator.amend_sale(sale_id, intent)

    def delete_sale(self, sale_id: int) -> SaleOperationResult:
        logger.info(f"Deleting sale {sale_id}")
        return self.coordinator.delete_sale(sale_id)

    def get_sale(self, sale_id: int) -> Optional[Sale]:
        with self.tx_manager.transaction() as tx:
            return self.sale_repo.get_sale_by_id(tx, sale_id)

    def list_sales(self) -> list[Sale]:
        with self.tx_manager.transaction() as tx:
            return self.sale_repo.get_all_sales(tx)

    def list_sales_for_product(self, product_id: int) -> list[Sale]:
        with self.tx_manager.transaction() as tx:
            return self.sale_repo.get_sales_by_product(tx, product_id)

    @staticmethod
    def _build_intent(
        operation: str,
        product_id: int,
        customer_id: int,
        quantity: int | str,
        sale_date: date | str | None,
        keep_date: bool = False,
    ) -> SaleIntentDTO | SaleOperationResult:
        """Validates raw input before any transaction is opened."""
        try:
            parsed_quantity = _parse_quantity(quantity)
        except ValueError as e:
            return SaleOperationResult.failure(operation, SaleErrorKind.VALIDATION_FAILURE, str(e))

        if keep_date and sale_date in (None, ""):
            parsed_date = None
        else:
            try:
                parsed_date = parse_sale_date(sale_date)
            except ValueError:
                return SaleOperationResult.failure(
                    operation,
                    SaleErrorKind.VALIDATION_FAILURE,
                    f"Invalid sale date {sale_date!r}. Please use YYYY-MM-DD.",
                )

        return SaleIntentDTO(
            product_id=product_id,
            customer_id=customer_id,
            quantity=parsed_quantity,
            sale_date=parsed_date,
        )


def _parse_quantity(quantity: int | str) -> int:
    if isinstance(quantity, bool):
        raise ValueError("Quantity must be a positive number.")
    if isinstance(quantity, str):
        try:
            quantity = int(quantity.strip())
        except ValueError:
            raise ValueError(f"Quantity must be a valid number, got {quantity!r}.")
    if not isinstance(quantity, int) or quantity <= 0:
        raise ValueError("Quantity must be a positive number.")
    return quantity
