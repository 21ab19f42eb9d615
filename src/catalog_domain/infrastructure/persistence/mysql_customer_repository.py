# src/catalog_domain/infrastructure/persistence/mysql_customer_repository.py
"""MySQL implementation of Customer repository."""

import logging
from typing import Optional

from mysql.connector import Error

from src.catalog_domain.domain.entities.customer import Customer
from src.catalog_domain.domain.repositories.customer_repository import ICustomerRepository
from src.common.exceptions.custom_exceptions import DatabaseError
from src.common.persistence.mysql_errors import table_name, to_application_error
from src.common.persistence.transaction import ITransaction

logger = logging.getLogger(__name__)

CUSTOMER_COLUMNS = "customer_id, first_name, last_name, email, phone"


class MySQLCustomerRepository(ICustomerRepository):

    def __init__(self) -> None:
        self.table = table_name("customers")

    def create_tables(self, tx: ITransaction) -> None:
        """Creates the customers table if it does not exist."""
        create_customers_table_query = f"""
        CREATE TABLE IF NOT EXISTS {self.table} (
            customer_id INT UNSIGNED PRIMARY KEY AUTO_INCREMENT,
            first_name VARCHAR(100) NOT NULL,
            last_name VARCHAR(100) NOT NULL,
            email VARCHAR(100) NULL,
            phone VARCHAR(20) NULL,
            UNIQUE KEY uk_customer_email (email),
            INDEX idx_customer_name (last_name, first_name)
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;
        """
        cursor = tx.cursor()
        try:
            cursor.execute(create_customers_table_query)
            logger.info(f"Table {self.table} checked/created.")
        except Error as e:
            raise DatabaseError(f"Error creating {self.table} table: {e}", original_exception=e)
        finally:
            cursor.close()

    def add_customer(self, tx: ITransaction, customer: Customer) -> Optional[int]:
        cursor = tx.cursor()
        insert_query = f"""
        INSERT INTO {self.table} (first_name, last_name, email, phone)
        VALUES (%s, %s, %s, %s)
        """
        try:
            cursor.execute(insert_query, (customer.first_name, customer.last_name, customer.email, customer.phone))
            if cursor.rowcount == 0:
                return None
            return cursor.lastrowid
        except Error as e:
            logger.error(f"Failed to add customer {customer.full_name}: {e}")
            raise to_application_error(f"Error adding customer {customer.full_name}: {e}", e)
        finally:
            cursor.close()

    def get_customer_by_id(self, tx: ITransaction, customer_id: int) -> Optional[Customer]:
        cursor = tx.cursor(dictionary=True)
        try:
            cursor.execute(f"SELECT {CUSTOMER_COLUMNS} FROM {self.table} WHERE customer_id = %s", (customer_id,))
            row = cursor.fetchone()
            return self._row_to_customer(row) if row else None
        except Error as e:
            raise DatabaseError(f"Error fetching customer {customer_id}: {e}", original_exception=e)
        finally:
            cursor.close()

    def get_customer_by_name(self, tx: ITransaction, first_name: str, last_name: str) -> Optional[Customer]:
        cursor = tx.cursor(dictionary=True)
        query = f"""
        SELECT {CUSTOMER_COLUMNS} FROM {self.table}
        WHERE first_name = %s AND last_name = %s
        ORDER BY customer_id
        LIMIT 1
        """
        try:
            cursor.execute(query, (first_name, last_name))
            row = cursor.fetchone()
            return self._row_to_customer(row) if row else None
        except Error as e:
            raise DatabaseError(f"Error fetching customer {first_name} {last_name}: {e}", original_exception=e)
        finally:
            cursor.close()

    def get_all_customers(self, tx: ITransaction) -> list[Customer]:
        cursor = tx.cursor(dictionary=True)
        try:
            cursor.execute(f"SELECT {CUSTOMER_COLUMNS} FROM {self.table} ORDER BY customer_id")
            return [self._row_to_customer(row) for row in cursor.fetchall()]
        except Error as e:
            raise DatabaseError(f"Error fetching customers: {e}", original_exception=e)
        finally:
            cursor.close()

    def update_customer(self, tx: ITransaction, customer: Customer) -> bool:
        cursor = tx.cursor()
        update_query = f"""
        UPDATE {self.table}
        SET first_name = %s, last_name = %s, email = %s, phone = %s
        WHERE customer_id = %s
        """
        params = (customer.first_name, customer.last_name, customer.email, customer.phone, customer.customer_id)
        try:
            cursor.execute(update_query, params)
            return cursor.rowcount > 0
        except Error as e:
            logger.error(f"Failed to update customer {customer.customer_id}: {e}")
            raise to_application_error(f"Error updating customer {customer.customer_id}: {e}", e)
        finally:
            cursor.close()

    def delete_customer(self, tx: ITransaction, customer_id: int) -> bool:
        cursor = tx.cursor()
        try:
            cursor.execute(f"DELETE FROM {self.table} WHERE customer_id = %s", (customer_id,))
            return cursor.rowcount > 0
        except Error as e:
            logger.error(f"Failed to delete customer {customer_id}: {e}")
            raise to_application_error(f"Error deleting customer {customer_id}: {e}", e)
        finally:
            cursor.close()

    @staticmethod
    def _row_to_customer(row: dict) -> Customer:
        return Customer(
            customer_id=row["customer_id"],
            first_name=row["first_name"],
            last_name=row["last_name"],
            email=row["email"],
            phone=row["phone"],
        )
