"""
Outbound port for product lookup.

The product catalog is owned by the back-office persistence layer.
The composer only needs read access by ID.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from ..entities import Product


class ProductLookup(ABC):
    """Read-only access to catalog products."""

    @abstractmethod
    async def get(self, product_id: str) -> Product | None:
        """Return the product, or None if it does not exist."""
        ...

    async def get_many(self, product_ids: Iterable[str]) -> dict[str, Product]:
        """
        Resolve several products at once.

        Unknown IDs are absent from the returned mapping. Adapters backed by
        a database should override this with a single query.
        """
        found: dict[str, Product] = {}
        for product_id in product_ids:
            if product_id in found:
                continue
            product = await self.get(product_id)
            if product is not None:
                found[product_id] = product
        return found
