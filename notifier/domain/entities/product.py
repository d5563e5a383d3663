from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class Product:
    """Read-only view of a catalog product, as supplied by the product lookup."""

    id: str
    name: str
    price: Decimal
    discounted_price: Decimal | None = None
    description: str = ""
    content: str = ""

    @property
    def unit_price(self) -> Decimal:
        """Price charged per unit: the discounted price when present."""
        if self.discounted_price is not None:
            return self.discounted_price
        return self.price

    @property
    def summary_text(self) -> str:
        return self.description or self.content or "N/A"


@dataclass(frozen=True)
class CartItem:
    """One line of a customer cart."""

    product_id: str
    quantity: int

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValueError("Cart item quantity must be at least 1")
