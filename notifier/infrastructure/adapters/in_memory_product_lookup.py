from collections.abc import Iterable

from ...domain.entities import Product
from ...domain.ports import ProductLookup


class InMemoryProductLookup(ProductLookup):
    """
    Dictionary-backed ProductLookup.

    For development and tests; the back-office persistence layer
    provides the production adapter.
    """

    def __init__(self, products: Iterable[Product] = ()) -> None:
        self._products: dict[str, Product] = {p.id: p for p in products}

    def add(self, product: Product) -> None:
        self._products[product.id] = product

    async def get(self, product_id: str) -> Product | None:
        return self._products.get(product_id)

    async def get_many(self, product_ids: Iterable[str]) -> dict[str, Product]:
        return {pid: self._products[pid] for pid in product_ids if pid in self._products}
