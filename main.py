"""Main application entry point: prepares the sales database and reports current stock."""

import logging

from src.catalog_domain.application.catalog_service import CatalogApplicationService
from src.catalog_domain.infrastructure.persistence.mysql_customer_repository import (
    MySQLCustomerRepository,
)
from src.catalog_domain.infrastructure.persistence.mysql_product_repository import (
    MySQLProductRepository,
)
from src.common.config.settings import settings
from src.common.exceptions.custom_exceptions import ApplicationError, DatabaseError
from src.common.logger_config import setup_logging
from src.common.persistence.mysql_transaction import MySQLTransactionManager
from src.sales_domain.application.sale_transaction_coordinator import (
    SaleTransactionCoordinator,
)
from src.sales_domain.application.sales_service import SalesApplicationService
from src.sales_domain.infrastructure.persistence.mysql_sale_repository import (
    MySQLSaleRepository,
)

logger = logging.getLogger(__name__)


def setup_dependencies() -> tuple[CatalogApplicationService, SalesApplicationService]:
    """Initializes and wires up application dependencies."""
    tx_manager = MySQLTransactionManager()
    product_repository = MySQLProductRepository()
    customer_repository = MySQLCustomerRepository()
    sale_repository = MySQLSaleRepository()

    catalog_service = CatalogApplicationService(
        product_repo=product_repository, customer_repo=customer_repository, tx_manager=tx_manager
    )
    coordinator = SaleTransactionCoordinator(
        tx_manager=tx_manager, sale_repo=sale_repository, product_repo=product_repository
    )
    sales_service = SalesApplicationService(coordinator=coordinator, sale_repo=sale_repository, tx_manager=tx_manager)
    return catalog_service, sales_service


def create_db_tables(tx_manager: MySQLTransactionManager | None = None) -> None:
    """Creates products, customers and sales tables, in foreign key order."""
    tx_manager = tx_manager or MySQLTransactionManager()
    try:
        with tx_manager.transaction() as tx:
            MySQLProductRepository().create_tables(tx)
            MySQLCustomerRepository().create_tables(tx)
            MySQLSaleRepository().create_tables(tx)
        logger.info("Database tables created/verified successfully")
    except DatabaseError as e:
        logger.error(f"Error creating database tables: {e}")
        raise


def log_stock_report(catalog_service: CatalogApplicationService, sales_service: SalesApplicationService) -> None:
    """Logs every product with its current stock and the quantity sold so far."""
    products = catalog_service.list_products()
    if not products:
        logger.warning("No products recorded yet.")
        return

    sold_by_product: dict[int, int] = {}
    for sale in sales_service.list_sales():
        sold_by_product[sale.product_id] = sold_by_product.get(sale.product_id, 0) + sale.quantity

    logger.info(f"--- Stock report ({len(products)} products) ---")
    for product in products:
        logger.info(
            f"  [{product.product_id}] {product.name}: price {product.price}, "
            f"in stock {product.stock}, sold {sold_by_product.get(product.product_id, 0)}"
        )


def run() -> None:
    create_db_tables()
    catalog_service, sales_service = setup_dependencies()
    try:
        log_stock_report(catalog_service, sales_service)
    except ApplicationError as e:
        logger.error(f"An error occurred while building the stock report: {e}")
        raise


if __name__ == "__main__":
    setup_logging()
    logger.info(f"Sales management core starting (database '{settings.DB_DATABASE}' on {settings.DB_HOST}).")
    run()
    logger.info("Done.")
