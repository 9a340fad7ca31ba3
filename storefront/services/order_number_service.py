"""Human-readable order numbers from a monotonic counter."""

import logging

from storefront.core.config import get_settings
from storefront.core.storage import get_stores
from storefront.stores.base import CounterStore

logger = logging.getLogger(__name__)


def format_order_number(value: int, width: int = 6) -> str:
    """Format a counter value as an order number, e.g. 42 -> "#000042"."""
    return "#" + str(value).zfill(width)


class OrderNumberAllocator:
    """Allocates order numbers by fetch-and-add on a named counter.

    A number handed out to a commit that later fails is never reused, so
    the sequence may have gaps but never repeats or goes backwards.
    """

    def __init__(self, counters: CounterStore | None = None) -> None:
        settings = get_settings()
        self.counters = counters or get_stores().counters
        self.counter_name = settings.order_counter_name
        self.width = settings.order_number_width

    def allocate(self) -> int:
        """Atomically increment the counter and return the new value."""
        return self.counters.increment(self.counter_name)

    def next_order_number(self) -> str:
        """Allocate and format the next order number."""
        order_number = format_order_number(self.allocate(), self.width)
        logger.debug("Allocated order number %s", order_number)
        return order_number
