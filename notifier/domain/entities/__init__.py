from .product import CartItem, Product

__all__ = ["CartItem", "Product"]
