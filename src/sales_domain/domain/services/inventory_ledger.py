# src/sales_domain/domain/services/inventory_ledger.py
"""Inventory ledger: the only path through which sales move product stock."""

import logging
from enum import Enum

from src.catalog_domain.domain.repositories.product_repository import IProductRepository
from src.common.persistence.transaction import ITransaction

logger = logging.getLogger(__name__)


class LedgerOutcome(str, Enum):
    APPLIED = "applied"
    PRODUCT_NOT_FOUND = "product_not_found"
    INSUFFICIENT_STOCK = "insufficient_stock"

    @property
    def is_success(self) -> bool:
        return self is LedgerOutcome.APPLIED


class InventoryLedger:
    """
    Keeps product stock non-negative while applying signed deltas.

    Works inside the caller's transaction and never commits or rolls back; the
    transaction boundary belongs to the sale transaction coordinator.
    """

    def __init__(self, product_repo: IProductRepository) -> None:
        self.product_repo = product_repo

    def check_availability(self, tx: ITransaction, product_id: int, required_quantity: int) -> bool:
        """True iff the product exists and has at least required_quantity in stock."""
        product = self.product_repo.get_product_by_id(tx, product_id)
        return product is not None and product.stock >= required_quantity

    def apply_delta(self, tx: ITransaction, product_id: int, delta: int) -> LedgerOutcome:
        """Adds delta to the product's stock, refusing to go below zero."""
        if self.product_repo.adjust_stock(tx, product_id, delta):
            logger.debug(f"Stock of product {product_id} adjusted by {delta:+d}")
            return LedgerOutcome.APPLIED

        # The guarded update matched no row: tell a missing product from a shortfall
        if self.product_repo.get_product_by_id(tx, product_id) is None:
            logger.warning(f"Stock adjustment {delta:+d} rejected: product {product_id} not found")
            return LedgerOutcome.PRODUCT_NOT_FOUND
        logger.warning(f"Stock adjustment {delta:+d} rejected: product {product_id} would go negative")
        return LedgerOutcome.INSUFFICIENT_STOCK
