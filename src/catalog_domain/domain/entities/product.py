"""Product entity."""

from dataclasses import dataclass
from decimal import Decimal


@dataclass
class Product:
    """A sellable item with its current price and on-hand stock."""

    name: str
    price: Decimal
    stock: int = 0
    product_id: int | None = None  # Assigned by the database on insert

    def __post_init__(self) -> None:
        """Post-initialization for validation."""
        if not self.name or not self.name.strip():
            raise ValueError("Product name cannot be empty.")
        if not isinstance(self.price, Decimal):
            self.price = Decimal(str(self.price))
        if self.price <= 0:
            raise ValueError("Price must be positive.")
        if self.stock < 0:
            raise ValueError("Stock cannot be negative.")
