"""Database model type definitions."""

from storefront.models.cart import Cart, CartLine
from storefront.models.checkout import PendingCheckout
from storefront.models.notification import Notification, NotificationCreate
from storefront.models.order import Order, OrderCreate, OrderItem, OrderStatus, ShippingAddress
from storefront.models.product import Discount, Product, Variant

__all__ = [
    "Cart",
    "CartLine",
    "Discount",
    "Notification",
    "NotificationCreate",
    "Order",
    "OrderCreate",
    "OrderItem",
    "OrderStatus",
    "PendingCheckout",
    "Product",
    "ShippingAddress",
    "Variant",
]
