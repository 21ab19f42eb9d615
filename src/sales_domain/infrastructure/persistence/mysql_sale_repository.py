# src/sales_domain/infrastructure/persistence/mysql_sale_repository.py
"""MySQL implementation of Sale repository."""

import logging
from typing import Optional

from mysql.connector import Error

from src.common.exceptions.custom_exceptions import DatabaseError
from src.common.persistence.mysql_errors import table_name, to_application_error
from src.common.persistence.transaction import ITransaction
from src.common.utils.date_utils import format_date_for_db
from src.sales_domain.domain.entities.sale import Sale
from src.sales_domain.domain.repositories.sale_repository import ISaleRepository

logger = logging.getLogger(__name__)

SALE_COLUMNS = "sale_id, product_id, customer_id, quantity, unit_price_at_sale, total_sale_price, sale_date"


class MySQLSaleRepository(ISaleRepository):
    """MySQL implementation of the Sale Repository."""

    def __init__(self) -> None:
        self.table = table_name("sales")
        self.products_table = table_name("products")
        self.customers_table = table_name("customers")

    def create_tables(self, tx: ITransaction) -> None:
        """
        Creates the sales table. The products and customers tables must exist first.
        ON DELETE RESTRICT keeps referenced products and customers from being removed.
        """
        create_sales_table_query = f"""
        CREATE TABLE IF NOT EXISTS {self.table} (
            sale_id INT UNSIGNED PRIMARY KEY AUTO_INCREMENT,
            product_id INT UNSIGNED NOT NULL,
            customer_id INT UNSIGNED NOT NULL,
            quantity INT NOT NULL,
            unit_price_at_sale DECIMAL(10, 2) NOT NULL,
            total_sale_price DECIMAL(10, 2) NOT NULL,
            sale_date DATE NOT NULL,
            INDEX idx_sale_product (product_id),
            INDEX idx_sale_customer (customer_id),
            INDEX idx_sale_date (sale_date),
            CONSTRAINT fk_{self.table}_product FOREIGN KEY (product_id)
                REFERENCES {self.products_table}(product_id) ON DELETE RESTRICT,
            CONSTRAINT fk_{self.table}_customer FOREIGN KEY (customer_id)
                REFERENCES {self.customers_table}(customer_id) ON DELETE RESTRICT,
            CONSTRAINT chk_{self.table}_quantity_positive CHECK (quantity > 0)
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;
        """
        cursor = tx.cursor()
        try:
            cursor.execute(create_sales_table_query)
            logger.info(f"Table {self.table} checked/created.")
        except Error as e:
            raise DatabaseError(f"Error creating {self.table} table: {e}", original_exception=e)
        finally:
            cursor.close()

    def add_sale(self, tx: ITransaction, sale: Sale) -> Optional[int]:
        cursor = tx.cursor()
        insert_query = f"""
        INSERT INTO {self.table}
        (product_id, customer_id, quantity, unit_price_at_sale, total_sale_price, sale_date)
        VALUES (%s, %s, %s, %s, %s, %s)
        """
        params = (
            sale.product_id,
            sale.customer_id,
            sale.quantity,
            sale.unit_price_at_sale,
            sale.total_sale_price,
            format_date_for_db(sale.sale_date),
        )
        try:
            cursor.execute(insert_query, params)
            if cursor.rowcount == 0:
                return None
            return cursor.lastrowid
        except Error as e:
            logger.error(f"Failed to insert sale for product {sale.product_id}: {e}")
            raise to_application_error(f"Error inserting sale for product {sale.product_id}: {e}", e)
        finally:
            cursor.close()

    def get_sale_by_id(self, tx: ITransaction, sale_id: int) -> Optional[Sale]:
        cursor = tx.cursor(dictionary=True)
        try:
            cursor.execute(f"SELECT {SALE_COLUMNS} FROM {self.table} WHERE sale_id = %s", (sale_id,))
            row = cursor.fetchone()
            return self._row_to_sale(row) if row else None
        except Error as e:
            raise DatabaseError(f"Error fetching sale {sale_id}: {e}", original_exception=e)
        finally:
            cursor.close()

    def get_all_sales(self, tx: ITransaction) -> list[Sale]:
        cursor = tx.cursor(dictionary=True)
        try:
            cursor.execute(f"SELECT {SALE_COLUMNS} FROM {self.table} ORDER BY sale_id")
            return [self._row_to_sale(row) for row in cursor.fetchall()]
        except Error as e:
            raise DatabaseError(f"Error fetching sales: {e}", original_exception=e)
        finally:
            cursor.close()

    def get_sales_by_product(self, tx: ITransaction, product_id: int) -> list[Sale]:
        cursor = tx.cursor(dictionary=True)
        try:
            cursor.execute(
                f"SELECT {SALE_COLUMNS} FROM {self.table} WHERE product_id = %s ORDER BY sale_id", (product_id,)
            )
            return [self._row_to_sale(row) for row in cursor.fetchall()]
        except Error as e:
            raise DatabaseError(f"Error fetching sales for product {product_id}: {e}", original_exception=e)
        finally:
            cursor.close()

    def update_sale(self, tx: ITransaction, sale: Sale) -> bool:
        cursor = tx.cursor()
        update_query = f"""
        UPDATE {self.table}
        SET product_id = %s, customer_id = %s, quantity = %s,
            unit_price_at_sale = %s, total_sale_price = %s, sale_date = %s
        WHERE sale_id = %s
        """
        params = (
            sale.product_id,
            sale.customer_id,
            sale.quantity,
            sale.unit_price_at_sale,
            sale.total_sale_price,
            format_date_for_db(sale.sale_date),
            sale.sale_id,
        )
        try:
            cursor.execute(update_query, params)
            return cursor.rowcount > 0
        except Error as e:
            logger.error(f"Failed to update sale {sale.sale_id}: {e}")
            raise to_application_error(f"Error updating sale {sale.sale_id}: {e}", e)
        finally:
            cursor.close()

    def delete_sale(self, tx: ITransaction, sale_id: int) -> bool:
        cursor = tx.cursor()
        try:
            cursor.execute(f"DELETE FROM {self.table} WHERE sale_id = %s", (sale_id,))
            return cursor.rowcount > 0
        except Error as e:
            logger.error(f"Failed to delete sale {sale_id}: {e}")
            raise to_application_error(f"Error deleting sale {sale_id}: {e}", e)
        finally:
            cursor.close()

    @staticmethod
    def _row_to_sale(row: dict) -> Sale:
        return Sale(
            sale_id=row["sale_id"],
            product_id=row["product_id"],
            customer_id=row["customer_id"],
            quantity=row["quantity"],
            unit_price_at_sale=row["unit_price_at_sale"],
            total_sale_price=row["total_sale_price"],
            sale_date=row["sale_date"],
        )
