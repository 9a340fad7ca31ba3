"""In-app notification fan-out for order events."""

import logging

from storefront.core.storage import get_stores
from storefront.models.notification import Notification, NotificationCreate
from storefront.models.order import Order
from storefront.stores.base import Stores

logger = logging.getLogger(__name__)


class NotificationService:
    """Writes one notification row per recipient of an order event."""

    def __init__(self, stores: Stores | None = None) -> None:
        stores = stores or get_stores()
        self.notifications = stores.notifications
        self.users = stores.users

    def _build(self, recipient_id: str, title: str, message: str, order: Order) -> NotificationCreate:
        return {
            "recipient_id": recipient_id,
            "title": title,
            "message": message,
            "order_id": order["id"],
        }

    async def order_created(self, order: Order) -> list[Notification]:
        """Tell every admin about a new order."""
        admin_ids = self.users.list_admin_ids()
        notifications = [
            self._build(admin_id, "New order", f"A new order has been created {order['order_number']}", order)
            for admin_id in admin_ids
        ]
        created = self.notifications.create_many(notifications)
        logger.info("Notified %d admins of order %s", len(created), order["order_number"])
        return created

    async def order_status_updated(self, order: Order) -> list[Notification]:
        """Tell the order's owner about a status change."""
        notification = self._build(
            order["user_id"],
            "Order status updated",
            f'Your order {order["order_number"]} status has been updated to "{order["status"]}".',
            order,
        )
        return self.notifications.create_many([notification])

    async def order_cancelled(self, order: Order) -> list[Notification]:
        """Tell every admin and the order's owner about a cancellation."""
        notifications = [
            self._build(admin_id, "Order cancelled", f"{order['order_number']} has been cancelled.", order)
            for admin_id in self.users.list_admin_ids()
        ]
        notifications.append(
            self._build(
                order["user_id"],
                "Your order has been cancelled",
                f"Your order {order['order_number']} has been successfully cancelled.",
                order,
            )
        )
        return self.notifications.create_many(notifications)
