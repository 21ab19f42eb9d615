# src/sales_domain/domain/repositories/sale_repository.py
"""Sale repository interface."""
from abc import ABC, abstractmethod
from typing import Optional

from src.common.persistence.transaction import ITransaction
from src.sales_domain.domain.entities.sale import Sale


class ISaleRepository(ABC):
    """
    Raw persistence of sale records.

    Writes here never touch product stock; only the sale transaction coordinator may
    call add/update/delete, pairing each with the matching ledger adjustment.
    """

    @abstractmethod
    def add_sale(self, tx: ITransaction, sale: Sale) -> Optional[int]:
        """Inserts a sale and returns its new id, or None if nothing was inserted."""
        pass

    @abstractmethod
    def get_sale_by_id(self, tx: ITransaction, sale_id: int) -> Optional[Sale]:
        pass

    @abstractmethod
    def get_all_sales(self, tx: ITransaction) -> list[Sale]:
        """Retrieves all sales ordered by id."""
        pass

    @abstractmethod
    def get_sales_by_product(self, tx: ITransaction, product_id: int) -> list[Sale]:
        """Retrieves all sales referencing a product, ordered by id."""
        pass

    @abstractmethod
    def update_sale(self, tx: ITransaction, sale: Sale) -> bool:
        """Rewrites every field of the sale identified by sale.sale_id."""
        pass

    @abstractmethod
    def delete_sale(self, tx: ITransaction, sale_id: int) -> bool:
        pass
