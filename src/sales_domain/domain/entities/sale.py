"""Sale entity."""

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

CENTS = Decimal("0.01")


def compute_total(unit_price: Decimal, quantity: int) -> Decimal:
    """Total sale price rounded to cents."""
    return (unit_price * quantity).quantize(CENTS, rounding=ROUND_HALF_UP)


@dataclass
class Sale:
    """
    One inventory-affecting event: a quantity of one product sold to one customer.

    unit_price_at_sale is the product price captured when the sale was recorded and is
    independent of the product's current price.
    """

    product_id: int
    customer_id: int
    quantity: int
    unit_price_at_sale: Decimal
    sale_date: date
    total_sale_price: Decimal | None = None
    sale_id: int | None = None

    def __post_init__(self) -> None:
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int) or self.quantity <= 0:
            raise ValueError("Quantity must be a positive integer.")
        if not isinstance(self.unit_price_at_sale, Decimal):
            self.unit_price_at_sale = Decimal(str(self.unit_price_at_sale))
        if self.unit_price_at_sale <= 0:
            raise ValueError("Unit price at sale must be positive.")
        if not isinstance(self.sale_date, date):
            raise ValueError("Sale date is required.")
        if self.total_sale_price is None:
            self.total_sale_price = compute_total(self.unit_price_at_sale, self.quantity)
        elif not isinstance(self.total_sale_price, Decimal):
            self.total_sale_price = Decimal(str(self.total_sale_price))
