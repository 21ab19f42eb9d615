# src/catalog_domain/infrastructure/persistence/mysql_product_repository.py
"""MySQL implementation of Product repository."""

import logging
from typing import Optional

from mysql.connector import Error

from src.catalog_domain.domain.entities.product import Product
from src.catalog_domain.domain.repositories.product_repository import IProductRepository
from src.common.exceptions.custom_exceptions import DatabaseError
from src.common.persistence.mysql_errors import table_name, to_application_error
from src.common.persistence.transaction import ITransaction

logger = logging.getLogger(__name__)


class MySQLProductRepository(IProductRepository):
    """MySQL implementation of the Product Repository."""

    def __init__(self) -> None:
        self.table = table_name("products")

    def create_tables(self, tx: ITransaction) -> None:
        """Creates the products table if it does not exist."""
        create_products_table_query = f"""
        CREATE TABLE IF NOT EXISTS {self.table} (
            product_id INT UNSIGNED PRIMARY KEY AUTO_INCREMENT,
            name VARCHAR(255) NOT NULL,
            price DECIMAL(10, 2) NOT NULL,
            stock INT NOT NULL DEFAULT 0,
            UNIQUE KEY uk_product_name (name),
            CONSTRAINT chk_{self.table}_price_positive CHECK (price > 0),
            CONSTRAINT chk_{self.table}_stock_non_negative CHECK (stock >= 0)
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;
        """
        cursor = tx.cursor()
        try:
            cursor.execute(create_products_table_query)
            logger.info(f"Table {self.table} checked/created.")
        except Error as e:
            raise DatabaseError(f"Error creating {self.table} table: {e}", original_exception=e)
        finally:
            cursor.close()

    def add_product(self, tx: ITransaction, product: Product) -> Optional[int]:
        cursor = tx.cursor()
        insert_query = f"INSERT INTO {self.table} (name, price, stock) VALUES (%s, %s, %s)"
        try:
            cursor.execute(insert_query, (product.name, product.price, product.stock))
            if cursor.rowcount == 0:
                return None
            return cursor.lastrowid
        except Error as e:
            logger.error(f"Failed to add product '{product.name}': {e}")
            raise to_application_error(f"Error adding product '{product.name}': {e}", e)
        finally:
            cursor.close()

    def get_product_by_id(self, tx: ITransaction, product_id: int) -> Optional[Product]:
        query = f"SELECT product_id, name, price, stock FROM {self.table} WHERE product_id = %s"
        return self._fetch_one(tx, query, (product_id,), f"Error fetching product {product_id}")

    def get_product_by_name(self, tx: ITransaction, name: str) -> Optional[Product]:
        query = f"SELECT product_id, name, price, stock FROM {self.table} WHERE name = %s"
        return self._fetch_one(tx, query, (name,), f"Error fetching product '{name}'")

    def get_all_products(self, tx: ITransaction) -> list[Product]:
        cursor = tx.cursor(dictionary=True)
        try:
            cursor.execute(f"SELECT product_id, name, price, stock FROM {self.table} ORDER BY product_id")
            return [self._row_to_product(row) for row in cursor.fetchall()]
        except Error as e:
            raise DatabaseError(f"Error fetching products: {e}", original_exception=e)
        finally:
            cursor.close()

    def update_product(self, tx: ITransaction, product: Product) -> bool:
        cursor = tx.cursor()
        update_query = f"UPDATE {self.table} SET name = %s, price = %s, stock = %s WHERE product_id = %s"
        try:
            cursor.execute(update_query, (product.name, product.price, product.stock, product.product_id))
            return cursor.rowcount > 0
        except Error as e:
            logger.error(f"Failed to update product {product.product_id}: {e}")
            raise to_application_error(f"Error updating product {product.product_id}: {e}", e)
        finally:
            cursor.close()

    def delete_product(self, tx: ITransaction, product_id: int) -> bool:
        cursor = tx.cursor()
        try:
            cursor.execute(f"DELETE FROM {self.table} WHERE product_id = %s", (product_id,))
            return cursor.rowcount > 0
        except Error as e:
            logger.error(f"Failed to delete product {product_id}: {e}")
            raise to_application_error(f"Error deleting product {product_id}: {e}", e)
        finally:
            cursor.close()

    def adjust_stock(self, tx: ITransaction, product_id: int, delta: int) -> bool:
        """Guarded increment; the WHERE clause keeps stock non-negative under concurrent writers."""
        cursor = tx.cursor()
        update_query = f"""
        UPDATE {self.table}
        SET stock = stock + %s
        WHERE product_id = %s AND stock + %s >= 0
        """
        try:
            cursor.execute(update_query, (delta, product_id, delta))
            return cursor.rowcount > 0
        except Error as e:
            logger.error(f"Failed to adjust stock of product {product_id} by {delta}: {e}")
            raise to_application_error(f"Error adjusting stock of product {product_id}: {e}", e)
        finally:
            cursor.close()

    def _fetch_one(self, tx: ITransaction, query: str, params: tuple, error_message: str) -> Optional[Product]:
        cursor = tx.cursor(dictionary=True)
        try:
            cursor.execute(query, params)
            row = cursor.fetchone()
            return self._row_to_product(row) if row else None
        except Error as e:
            raise DatabaseError(f"{error_message}: {e}", original_exception=e)
        finally:
            cursor.close()

    @staticmethod
    def _row_to_product(row: dict) -> Product:
        return Product(
            product_id=row["product_id"],
            name=row["name"],
            price=row["price"],
            stock=row["stock"],
        )
