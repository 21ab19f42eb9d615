"""Customer entity."""

from dataclasses import dataclass


@dataclass
class Customer:
    first_name: str
    last_name: str
    email: str | None = None
    phone: str | None = None
    customer_id: int | None = None

    def __post_init__(self) -> None:
        if not self.first_name or not self.first_name.strip():
            raise ValueError("First name is required.")
        if not self.last_name or not self.last_name.strip():
            raise ValueError("Last name is required.")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
