# tests/conftest.py
import copy
from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Optional
from unittest.mock import Mock

import pytest

from src.catalog_domain.application.catalog_service import CatalogApplicationService
from src.catalog_domain.domain.entities.customer import Customer
from src.catalog_domain.domain.entities.product import Product
from src.catalog_domain.domain.repositories.customer_repository import ICustomerRepository
from src.catalog_domain.domain.repositories.product_repository import IProductRepository
from src.common.config.settings import settings
from src.common.exceptions.custom_exceptions import TransactionError, ValidationError
from src.common.persistence.transaction import ITransaction, ITransactionManager
from src.sales_domain.application.sale_transaction_coordinator import SaleTransactionCoordinator
from src.sales_domain.application.sales_service import SalesApplicationService
from src.sales_domain.domain.entities.sale import Sale
from src.sales_domain.domain.repositories.sale_repository import ISaleRepository
from src.sales_domain.domain.services.inventory_ledger import InventoryLedger

# --- In-memory storage with snapshot transactions ---
#
# Each transaction works on a private copy of the committed tables; commit publishes
# the copy, rollback and close discard it. Reads inside a transaction see its own writes.


class InMemoryDatabase:
    def __init__(self) -> None:
        self.tables: dict = {
            "products": {},
            "customers": {},
            "sales": {},
            "next_ids": {"products": 1, "customers": 1, "sales": 1},
        }

    def snapshot(self) -> dict:
        return copy.deepcopy(self.tables)

    def publish(self, tables: dict) -> None:
        self.tables = tables


class FakeTransaction(ITransaction):
    def __init__(self, db: InMemoryDatabase, fail_commit: bool = False, fail_rollback: bool = False) -> None:
        self.db = db
        self.tables = db.snapshot()
        self.fail_commit = fail_commit
        self.fail_rollback = fail_rollback
        self.committed = False
        self.rolled_back = False
        self.closed = False
        self._active = True

    def cursor(self, dictionary: bool = False):
        return Mock()

    def commit(self) -> None:
        self._active = False
        if self.fail_commit:
            raise TransactionError("simulated commit failure")
        self.db.publish(self.tables)
        self.committed = True

    def rollback(self) -> None:
        self._active = False
        self.rolled_back = True
        if self.fail_rollback:
            raise TransactionError("simulated rollback failure")

    def close(self) -> None:
        self._active = False
        self.closed = True

    @property
    def is_active(self) -> bool:
        return self._active

    def next_id(self, table: str) -> int:
        new_id = self.tables["next_ids"][table]
        self.tables["next_ids"][table] = new_id + 1
        return new_id


class FakeTransactionManager(ITransactionManager):
    def __init__(self, db: InMemoryDatabase) -> None:
        self.db = db
        self.transactions: list[FakeTransaction] = []
        self.fail_commit = False
        self.fail_rollback = False

    def begin(self) -> FakeTransaction:
        tx = FakeTransaction(self.db, fail_commit=self.fail_commit, fail_rollback=self.fail_rollback)
        self.transactions.append(tx)
        return tx


class InMemoryProductRepository(IProductRepository):
    def add_product(self, tx: FakeTransaction, product: Product) -> Optional[int]:
        if any(p.name == product.name for p in tx.tables["products"].values()):
            raise ValidationError(f"Duplicate entry '{product.name}' for key 'uk_product_name'")
        product_id = tx.next_id("products")
        tx.tables["products"][product_id] = replace(product, product_id=product_id)
        return product_id

    def get_product_by_id(self, tx: FakeTransaction, product_id: int) -> Optional[Product]:
        product = tx.tables["products"].get(product_id)
        return replace(product) if product else None

    def get_product_by_name(self, tx: FakeTransaction, name: str) -> Optional[Product]:
        for product in tx.tables["products"].values():
            if product.name == name:
                return replace(product)
        return None

    def get_all_products(self, tx: FakeTransaction) -> list[Product]:
        return [replace(p) for _, p in sorted(tx.tables["products"].items())]

    def update_product(self, tx: FakeTransaction, product: Product) -> bool:
        if product.product_id not in tx.tables["products"]:
            return False
        if any(p.name == product.name and pid != product.product_id for pid, p in tx.tables["products"].items()):
            raise ValidationError(f"Duplicate entry '{product.name}' for key 'uk_product_name'")
        tx.tables["products"][product.product_id] = replace(product)
        return True

    def delete_product(self, tx: FakeTransaction, product_id: int) -> bool:
        if any(s.product_id == product_id for s in tx.tables["sales"].values()):
            raise ValidationError(f"Cannot delete product {product_id}: a foreign key constraint fails")
        return tx.tables["products"].pop(product_id, None) is not None

    def adjust_stock(self, tx: FakeTransaction, product_id: int, delta: int) -> bool:
        product = tx.tables["products"].get(product_id)
        if product is None or product.stock + delta < 0:
            return False
        product.stock += delta
        return True


class InMemoryCustomerRepository(ICustomerRepository):
    def add_customer(self, tx: FakeTransaction, customer: Customer) -> Optional[int]:
        if customer.email and any(c.email == customer.email for c in tx.tables["customers"].values()):
            raise ValidationError(f"Duplicate entry '{customer.email}' for key 'uk_customer_email'")
        customer_id = tx.next_id("customers")
        tx.tables["customers"][customer_id] = replace(customer, customer_id=customer_id)
        return customer_id

    def get_customer_by_id(self, tx: FakeTransaction, customer_id: int) -> Optional[Customer]:
        customer = tx.tables["customers"].get(customer_id)
        return replace(customer) if customer else None

    def get_customer_by_name(self, tx: FakeTransaction, first_name: str, last_name: str) -> Optional[Customer]:
        for _, customer in sorted(tx.tables["customers"].items()):
            if customer.first_name == first_name and customer.last_name == last_name:
                return replace(customer)
        return None

    def get_all_customers(self, tx: FakeTransaction) -> list[Customer]:
        return [replace(c) for _, c in sorted(tx.tables["customers"].items())]

    def update_customer(self, tx: FakeTransaction, customer: Customer) -> bool:
        if customer.customer_id not in tx.tables["customers"]:
            return False
        if customer.email and any(
            c.email == customer.email and cid != customer.customer_id for cid, c in tx.tables["customers"].items()
        ):
            raise ValidationError(f"Duplicate entry '{customer.email}' for key 'uk_customer_email'")
        tx.tables["customers"][customer.customer_id] = replace(customer)
        return True

    def delete_customer(self, tx: FakeTransaction, customer_id: int) -> bool:
        if any(s.customer_id == customer_id for s in tx.tables["sales"].values()):
            raise ValidationError(f"Cannot delete customer {customer_id}: a foreign key constraint fails")
        return tx.tables["customers"].pop(customer_id, None) is not None


class InMemorySaleRepository(ISaleRepository):
    def add_sale(self, tx: FakeTransaction, sale: Sale) -> Optional[int]:
        self._check_references(tx, sale)
        sale_id = tx.next_id("sales")
        tx.tables["sales"][sale_id] = replace(sale, sale_id=sale_id)
        return sale_id

    def get_sale_by_id(self, tx: FakeTransaction, sale_id: int) -> Optional[Sale]:
        sale = tx.tables["sales"].get(sale_id)
        return replace(sale) if sale else None

    def get_all_sales(self, tx: FakeTransaction) -> list[Sale]:
        return [replace(s) for _, s in sorted(tx.tables["sales"].items())]

    def get_sales_by_product(self, tx: FakeTransaction, product_id: int) -> list[Sale]:
        return [s for s in self.get_all_sales(tx) if s.product_id == product_id]

    def update_sale(self, tx: FakeTransaction, sale: Sale) -> bool:
        if sale.sale_id not in tx.tables["sales"]:
            return False
        self._check_references(tx, sale)
        tx.tables["sales"][sale.sale_id] = replace(sale)
        return True

    def delete_sale(self, tx: FakeTransaction, sale_id: int) -> bool:
        return tx.tables["sales"].pop(sale_id, None) is not None

    @staticmethod
    def _check_references(tx: FakeTransaction, sale: Sale) -> None:
        if sale.product_id not in tx.tables["products"] or sale.customer_id not in tx.tables["customers"]:
            raise ValidationError("Cannot add or update a child row: a foreign key constraint fails")


# --- Fixtures ---


@pytest.fixture(autouse=True)
def mock_settings_timezone(mocker) -> None:
    """Pins the timezone used for default sale dates."""
    mocker.patch.object(settings, "TIMEZONE", "Europe/Berlin")


@pytest.fixture
def in_memory_db() -> InMemoryDatabase:
    return InMemoryDatabase()


@pytest.fixture
def tx_manager(in_memory_db) -> FakeTransactionManager:
    return FakeTransactionManager(in_memory_db)


@pytest.fixture
def product_repo() -> InMemoryProductRepository:
    return InMemoryProductRepository()


@pytest.fixture
def customer_repo() -> InMemoryCustomerRepository:
    return InMemoryCustomerRepository()


@pytest.fixture
def sale_repo() -> InMemorySaleRepository:
    return InMemorySaleRepository()


@pytest.fixture
def ledger(product_repo) -> InventoryLedger:
    return InventoryLedger(product_repo)


@pytest.fixture
def coordinator(tx_manager, sale_repo, product_repo, ledger) -> SaleTransactionCoordinator:
    return SaleTransactionCoordinator(
        tx_manager=tx_manager, sale_repo=sale_repo, product_repo=product_repo, ledger=ledger
    )


@pytest.fixture
def catalog_service(product_repo, customer_repo, tx_manager) -> CatalogApplicationService:
    return CatalogApplicationService(product_repo=product_repo, customer_repo=customer_repo, tx_manager=tx_manager)


@pytest.fixture
def sales_service(coordinator, sale_repo, tx_manager) -> SalesApplicationService:
    return SalesApplicationService(coordinator=coordinator, sale_repo=sale_repo, tx_manager=tx_manager)


@pytest.fixture
def sample_product(catalog_service) -> Product:
    """Product with stock=10 and price=5.00."""
    return catalog_service.add_product("Widget", Decimal("5.00"), 10)


@pytest.fixture
def other_product(catalog_service) -> Product:
    """Product with stock=4 and price=12.50."""
    return catalog_service.add_product("Gadget", Decimal("12.50"), 4)


@pytest.fixture
def sample_customer(catalog_service) -> Customer:
    return catalog_service.add_customer("Ada", "Lovelace", "ada@example.com", "555-0100")


@pytest.fixture
def sample_sale_date() -> date:
    return date(2024, 3, 15)


@pytest.fixture
def committed_stock(in_memory_db):
    """Reads committed stock of a product straight from the in-memory tables."""

    def _stock(product_id: int) -> int:
        return in_memory_db.tables["products"][product_id].stock

    return _stock
