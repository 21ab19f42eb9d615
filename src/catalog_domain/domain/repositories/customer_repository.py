# src/catalog_domain/domain/repositories/customer_repository.py
"""Customer repository interface."""
from abc import ABC, abstractmethod
from typing import Optional

from src.catalog_domain.domain.entities.customer import Customer
from src.common.persistence.transaction import ITransaction


class ICustomerRepository(ABC):

    @abstractmethod
    def add_customer(self, tx: ITransaction, customer: Customer) -> Optional[int]:
        """Inserts a customer and returns its new id, or None if nothing was inserted."""
        pass

    @abstractmethod
    def get_customer_by_id(self, tx: ITransaction, customer_id: int) -> Optional[Customer]:
        pass

    @abstractmethod
    def get_customer_by_name(self, tx: ITransaction, first_name: str, last_name: str) -> Optional[Customer]:
        """Retrieves the first customer (lowest id) with the given first and last name."""
        pass

    @abstractmethod
    def get_all_customers(self, tx: ITransaction) -> list[Customer]:
        pass

    @abstractmethod
    def update_customer(self, tx: ITransaction, customer: Customer) -> bool:
        pass

    @abstractmethod
    def delete_customer(self, tx: ITransaction, customer_id: int) -> bool:
        pass
