"""First-purchase detection."""

from datetime import datetime
from typing import Iterable

from postlift.models import Order


class CustomerHistory:
    """
    Index of each customer's earliest order, built once per engine call.

    Looking up novelty is then O(1) instead of rescanning the whole history
    for every (order, post) pair.
    """

    def __init__(self, orders: Iterable[Order]):
        self._first_seen: dict[str, datetime] = {}
        for order in orders:
            email = order.customer_email
            if not email:
                continue
            first = self._first_seen.get(email)
            if first is None or order.created_at < first:
                self._first_seen[email] = order.created_at

    def is_new_customer(self, order: Order) -> bool:
        """
        True when no order with the same email happened strictly earlier.

        Orders without an email count as new: we cannot prove otherwise.
        """
        if not order.customer_email:
            return True
        first = self._first_seen.get(order.customer_email)
        return first is None or first >= order.created_at


def is_new_customer(order: Order, all_orders: Iterable[Order]) -> bool:
    """One-off convenience wrapper around CustomerHistory."""
    return CustomerHistory(all_orders).is_new_customer(order)
