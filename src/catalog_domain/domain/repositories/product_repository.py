# src/catalog_domain/domain/repositories/product_repository.py
"""Product repository interface."""
from abc import ABC, abstractmethod
from typing import Optional

from src.catalog_domain.domain.entities.product import Product
from src.common.persistence.transaction import ITransaction


class IProductRepository(ABC):

    @abstractmethod
    def add_product(self, tx: ITransaction, product: Product) -> Optional[int]:
        """Inserts a product and returns its new id, or None if nothing was inserted."""
        pass

    @abstractmethod
    def get_product_by_id(self, tx: ITransaction, product_id: int) -> Optional[Product]:
        """Retrieves a product by its id."""
        pass

    @abstractmethod
    def get_product_by_name(self, tx: ITransaction, name: str) -> Optional[Product]:
        """Retrieves a product by its unique name."""
        pass

    @abstractmethod
    def get_all_products(self, tx: ITransaction) -> list[Product]:
        """Retrieves all products ordered by id."""
        pass

    @abstractmethod
    def update_product(self, tx: ITransaction, product: Product) -> bool:
        """Overwrites name, price and stock. Returns False if no row matched."""
        pass

    @abstractmethod
    def delete_product(self, tx: ITransaction, product_id: int) -> bool:
        """Deletes a product. Returns False if no row matched."""
        pass

    @abstractmethod
    def adjust_stock(self, tx: ITransaction, product_id: int, delta: int) -> bool:
        """
        Atomically applies stock = stock + delta.
        Returns False, leaving the row untouched, if the product is absent or the
        result would be negative.
        """
        pass
