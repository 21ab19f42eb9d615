# src/catalog_domain/application/catalog_service.py
"""Application service for Product and Customer administration."""

import logging
from decimal import Decimal, InvalidOperation
from typing import Optional

from src.catalog_domain.domain.entities.customer import Customer
from src.catalog_domain.domain.entities.product import Product
from src.catalog_domain.domain.repositories.customer_repository import ICustomerRepository
from src.catalog_domain.domain.repositories.product_repository import IProductRepository
from src.common.exceptions.custom_exceptions import DatabaseError, NotFoundError, ValidationError
from src.common.persistence.transaction import ITransactionManager

logger = logging.getLogger(__name__)


class CatalogApplicationService:
    """
    Product and customer CRUD.

    Writes run in their own transaction and raise ValidationError, NotFoundError or
    DatabaseError; a failed write leaves every table unchanged. Stock set here is a
    direct admin edit. Stock movements caused by sales go through the sales domain.
    """

    def __init__(
        self,
        product_repo: IProductRepository,
        customer_repo: ICustomerRepository,
        tx_manager: ITransactionManager,
    ) -> None:
        self.product_repo = product_repo
        self.customer_repo = customer_repo
        self.tx_manager = tx_manager

    # --- Products ---

    def add_product(self, name: str, price: Decimal | str | float, stock: int | str) -> Product:
        product = self._build_product(name, price, stock)
        with self.tx_manager.transaction() as tx:
            product_id = self.product_repo.add_product(tx, product)
            if product_id is None:
                raise DatabaseError(f"Insert of product '{product.name}' affected no rows")
            product.product_id = product_id
        logger.info(f"Product {product_id} '{product.name}' added with stock {product.stock}.")
        return product

    def update_product(self, product_id: int, name: str, price: Decimal | str | float, stock: int | str) -> Product:
        product = self._build_product(name, price, stock, product_id=product_id)
        with self.tx_manager.transaction() as tx:
            if not self.product_repo.update_product(tx, product):
                raise NotFoundError("Product", product_id)
        logger.info(
            f"Product {product_id} updated: name='{product.name}', price={product.price}, stock={product.stock}"
        )
        return product

    def delete_product(self, product_id: int) -> None:
        """Raises ValidationError while any sale still references the product."""
        with self.tx_manager.transaction() as tx:
            if not self.product_repo.delete_product(tx, product_id):
                raise NotFoundError("Product", product_id)
        logger.info(f"Product {product_id} deleted.")

    def get_product(self, product_id: int) -> Optional[Product]:
        with self.tx_manager.transaction() as tx:
            return self.product_repo.get_product_by_id(tx, product_id)

    def get_product_by_name(self, name: str) -> Optional[Product]:
        with self.tx_manager.transaction() as tx:
            return self.product_repo.get_product_by_name(tx, name.strip())

    def list_products(self) -> list[Product]:
        with self.tx_manager.transaction() as tx:
            return self.product_repo.get_all_products(tx)

    # --- Customers ---

    def add_customer(
        self, first_name: str, last_name: str, email: str | None = None, phone: str | None = None
    ) -> Customer:
        customer = self._build_customer(first_name, last_name, email, phone)
        with self.tx_manager.transaction() as tx:
            customer_id = self.customer_repo.add_customer(tx, customer)
            if customer_id is None:
                raise DatabaseError(f"Insert of customer {customer.full_name} affected no rows")
            customer.customer_id = customer_id
        logger.info(f"Customer {customer_id} {customer.full_name} added.")
        return customer

    def update_customer(
        self, customer_id: int, first_name: str, last_name: str, email: str | None = None, phone: str | None = None
    ) -> Customer:
        customer = self._build_customer(first_name, last_name, email, phone, customer_id=customer_id)
        with self.tx_manager.transaction() as tx:
            if not self.customer_repo.update_customer(tx, customer):
                raise NotFoundError("Customer", customer_id)
        logger.info(f"Customer {customer_id} updated.")
        return customer

    def delete_customer(self, customer_id: int) -> None:
        """Raises ValidationError while any sale still references the customer."""
        with self.tx_manager.transaction() as tx:
            if not self.customer_repo.delete_customer(tx, customer_id):
                raise NotFoundError("Customer", customer_id)
        logger.info(f"Customer {customer_id} deleted.")

    def get_customer(self, customer_id: int) -> Optional[Customer]:
        with self.tx_manager.transaction() as tx:
            return self.customer_repo.get_customer_by_id(tx, customer_id)

    def get_customer_by_name(self, first_name: str, last_name: str) -> Optional[Customer]:
        with self.tx_manager.transaction() as tx:
            return self.customer_repo.get_customer_by_name(tx, first_name.strip(), last_name.strip())

    def list_customers(self) -> list[Customer]:
        with self.tx_manager.transaction() as tx:
            return self.customer_repo.get_all_customers(tx)

    @staticmethod
    def _build_product(
        name: str, price: Decimal | str | float, stock: int | str, product_id: int | None = None
    ) -> Product:
        try:
            parsed_price = Decimal(str(price).strip())
            parsed_stock = int(str(stock).strip())
        except (InvalidOperation, ValueError):
            raise ValidationError(f"Price and stock must be valid numbers (price={price!r}, stock={stock!r}).")
        if not parsed_price.is_finite():
            raise ValidationError(f"Price must be a finite number, got {price!r}.")
        # Stored as DECIMAL(10, 2)
        if parsed_price.normalize().as_tuple().exponent < -2:
            raise ValidationError(f"Price must have at most two decimal places, got {price!r}.")
        try:
            return Product(name=(name or "").strip(), price=parsed_price, stock=parsed_stock, product_id=product_id)
        except ValueError as e:
            raise ValidationError(str(e))

    @staticmethod
    def _build_customer(
        first_name: str, last_name: str, email: str | None, phone: str | None, customer_id: int | None = None
    ) -> Customer:
        try:
            return Customer(
                first_name=(first_name or "").strip(),
                last_name=(last_name or "").strip(),
                email=(email or "").strip() or None,
                phone=(phone or "").strip() or None,
                customer_id=customer_id,
            )
        except ValueError as e:
            raise ValidationError(str(e))
