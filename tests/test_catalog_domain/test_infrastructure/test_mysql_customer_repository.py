# tests/test_catalog_domain/test_infrastructure/test_mysql_customer_repository.py

from unittest.mock import MagicMock

import pytest
from mysql.connector import Error, errorcode

from src.catalog_domain.domain.entities.customer import Customer
from src.catalog_domain.infrastructure.persistence.mysql_customer_repository import MySQLCustomerRepository
from src.common.exceptions.custom_exceptions import DatabaseError, ValidationError


@pytest.fixture
def mock_cursor() -> MagicMock:
    return MagicMock()


@pytest.fixture
def mock_tx(mock_cursor) -> MagicMock:
    tx = MagicMock()
    tx.cursor.return_value = mock_cursor
    return tx


@pytest.fixture
def customer_repository() -> MySQLCustomerRepository:
    return MySQLCustomerRepository()


def test_create_tables(customer_repository, mock_tx, mock_cursor) -> None:
    customer_repository.create_tables(mock_tx)

    query = mock_cursor.execute.call_args[0][0]
    assert query.strip().startswith("CREATE TABLE IF NOT EXISTS customers")
    assert "UNIQUE KEY uk_customer_email (email)" in query
    mock_cursor.close.assert_called_once()


def test_add_customer(customer_repository, mock_tx, mock_cursor) -> None:
    mock_cursor.rowcount = 1
    mock_cursor.lastrowid = 4

    customer_id = customer_repository.add_customer(mock_tx, Customer(first_name="Ada", last_name="Lovelace"))

    assert customer_id == 4
    query, params = mock_cursor.execute.call_args[0]
    assert query.strip().startswith("INSERT INTO customers")
    assert params == ("Ada", "Lovelace", None, None)


def test_add_customer_duplicate_email(customer_repository, mock_tx, mock_cursor) -> None:
    mock_cursor.execute.side_effect = Error("Duplicate entry 'ada@example.com'", errno=errorcode.ER_DUP_ENTRY)

    with pytest.raises(ValidationError, match="Error adding customer Ada Lovelace"):
        customer_repository.add_customer(
            mock_tx, Customer(first_name="Ada", last_name="Lovelace", email="ada@example.com")
        )


def test_get_customer_by_name(customer_repository, mock_tx, mock_cursor) -> None:
    mock_cursor.fetchone.return_value = {
        "customer_id": 4,
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email": "ada@example.com",
        "phone": None,
    }

    customer = customer_repository.get_customer_by_name(mock_tx, "Ada", "Lovelace")

    assert customer.customer_id == 4
    assert customer.full_name == "Ada Lovelace"
    query, params = mock_cursor.execute.call_args[0]
    assert "LIMIT 1" in query
    assert params == ("Ada", "Lovelace")


def test_get_customer_by_id_error(customer_repository, mock_tx, mock_cursor) -> None:
    mock_cursor.execute.side_effect = Error("Database connection failed")

    with pytest.raises(DatabaseError, match="Error fetching customer 4"):
        customer_repository.get_customer_by_id(mock_tx, 4)

    mock_cursor.close.assert_called_once()


def test_get_all_customers(customer_repository, mock_tx, mock_cursor) -> None:
    mock_cursor.fetchall.return_value = [
        {"customer_id": 1, "first_name": "Ada", "last_name": "Lovelace", "email": None, "phone": None},
        {"customer_id": 2, "first_name": "Alan", "last_name": "Turing", "email": None, "phone": "555"},
    ]

    customers = customer_repository.get_all_customers(mock_tx)

    assert [c.customer_id for c in customers] == [1, 2]
    assert customers[1].phone == "555"


def test_update_customer(customer_repository, mock_tx, mock_cursor) -> None:
    mock_cursor.rowcount = 1
    customer = Customer(first_name="Ada", last_name="King", email="ada@example.com", customer_id=4)

    assert customer_repository.update_customer(mock_tx, customer)
    assert mock_cursor.execute.call_args[0][1] == ("Ada", "King", "ada@example.com", None, 4)


def test_delete_customer_still_referenced(customer_repository, mock_tx, mock_cursor) -> None:
    mock_cursor.execute.side_effect = Error(
        "Cannot delete or update a parent row", errno=errorcode.ER_ROW_IS_REFERENCED_2
    )

    with pytest.raises(ValidationError, match="Error deleting customer 4"):
        customer_repository.delete_customer(mock_tx, 4)
