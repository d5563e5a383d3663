"""
Message templates for transactional notifications.

Product data comes from the ProductLookup port. Cart summaries are
rendered from whatever products resolve: an unknown product ID drops
that line from both the list and the total instead of failing the
whole summary.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

import structlog

from ...domain import ComposerDataError
from ...domain.entities import CartItem, Product
from ...domain.ports import ProductLookup

logger = structlog.get_logger()

CENTS = Decimal("0.01")
DEFAULT_CURRENCY = "₹"
SEPARATOR = "------------------------------------"


@dataclass(frozen=True)
class CustomerInfo:
    """Who a notification is about, as submitted with the inquiry."""

    phone: str = ""
    name: str | None = None
    email: str | None = None
    user_id: str | None = None


@dataclass(frozen=True)
class CartLine:
    product: Product
    quantity: int

    @property
    def unit_price(self) -> Decimal:
        return self.product.unit_price

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class CartSummary:
    """Rendered cart summary plus the figures it was built from."""

    lines: tuple[CartLine, ...]
    total: Decimal
    text: str
    omitted_product_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class ProductInquiry:
    product: Product
    text: str


class NotificationComposer:
    """Builds the human-readable message bodies."""

    def __init__(self, products: ProductLookup, currency: str = DEFAULT_CURRENCY) -> None:
        self._products = products
        self._currency = currency

    def money(self, amount: Decimal) -> str:
        return f"{self._currency}{amount.quantize(CENTS, rounding=ROUND_HALF_UP)}"

    async def product_inquiry(self, product_id: str, customer: CustomerInfo) -> ProductInquiry:
        """
        Acknowledgement sent to a customer who asked about a product.

        Raises:
            ComposerDataError: If the product does not exist
        """
        product = await self._products.get(product_id)
        if product is None:
            raise ComposerDataError("Product", product_id)

        text = (
            f"Hi {customer.name or 'there'},\n\n"
            f'Thank you for your interest in "{product.name}"!\n'
            f"Price: {self.money(product.unit_price)}\n\n"
            f"Description: {product.summary_text}\n\n"
            "We'll get back to you shortly.\n\n"
            "Best regards,\n"
            "Your Store Team"
        )
        return ProductInquiry(product=product, text=text)

    async def cart_summary(self, items: Sequence[CartItem]) -> CartSummary:
        """Order summary for a customer's cart. Unknown products are skipped."""
        products = await self._products.get_many(item.product_id for item in items)

        lines: list[CartLine] = []
        omitted: list[str] = []
        for item in items:
            product = products.get(item.product_id)
            if product is None:
                omitted.append(item.product_id)
                continue
            lines.append(CartLine(product=product, quantity=item.quantity))

        if omitted:
            logger.warning("Cart items omitted from summary", product_ids=omitted)

        total = sum((line.subtotal for line in lines), Decimal("0"))

        parts = ["🛒 Your Order Summary 🛒\n\n"]
        for index, line in enumerate(lines, start=1):
            parts.append(
                f"{index}. {line.product.name}\n"
                f"   Qty: {line.quantity}\n"
                f"   Price: {self.money(line.unit_price)}\n"
                f"   Subtotal: {self.money(line.subtotal)}\n\n"
            )
        parts.append(f"{SEPARATOR}\n")
        parts.append(f"💰 Total Amount: {self.money(total)}\n")
        parts.append(f"{SEPARATOR}\n\n")
        parts.append("Thank you for your inquiry! We will contact you shortly.")

        return CartSummary(
            lines=tuple(lines),
            total=total,
            text="".join(parts),
            omitted_product_ids=tuple(omitted),
        )

    def admin_alert(self, title: str, fields: Mapping[str, object]) -> str:
        """Title line followed by one `Key: Value` line per field."""
        if not title.strip():
            raise ValueError("Admin alert title cannot be empty")
        rows = [f"{key}: {value if value not in (None, '') else 'N/A'}" for key, value in fields.items()]
        return "\n".join([f"{title}:", *rows])

    def product_inquiry_alert(self, product: Product, customer: CustomerInfo) -> str:
        return self.admin_alert(
            "New Product Inquiry",
            {
                "Product": product.name,
                "Client": f"{customer.name or 'N/A'} ({customer.phone})",
                "User ID": customer.user_id,
            },
        )

    def cart_summary_alert(self, summary: CartSummary, customer: CustomerInfo) -> str:
        return self.admin_alert(
            "Cart Summary Sent",
            {
                "Client": customer.phone,
                "Items": len(summary.lines),
                "Total": self.money(summary.total),
            },
        )
