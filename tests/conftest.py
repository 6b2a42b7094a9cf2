"""
PostLift - Pytest Configuration
Shared fixtures for attribution tests.
"""

import itertools
from datetime import datetime, timedelta, timezone

import pytest

from postlift.models import Influencer, LineItem, Order, Post


# =============================================================================
# TIME FIXTURES
# =============================================================================

@pytest.fixture
def t0() -> datetime:
    """Campaign start: Monday 2024-03-04 12:00 UTC."""
    return datetime(2024, 3, 4, 12, 0, tzinfo=timezone.utc)


# =============================================================================
# FACTORY FIXTURES
# =============================================================================

@pytest.fixture
def make_order():
    """Build orders with sequential ids."""
    counter = itertools.count(1)

    def _make(created_at, total=100.0, email=None, items=(), order_id=None):
        line_items = [
            LineItem(title=item) if isinstance(item, str) else item for item in items
        ]
        return Order.create(
            id=order_id or f"order-{next(counter)}",
            created_at=created_at,
            total_price=total,
            customer_email=email,
            line_items=line_items,
        )

    return _make


@pytest.fixture
def make_post():
    """Build product posts with sequential ids."""
    counter = itertools.count(1)

    def _make(timestamp, caption="", likes=0, comments=0, mentions=True, post_id=None):
        return Post.create(
            id=post_id or f"post-{next(counter)}",
            timestamp=timestamp,
            caption=caption,
            likes_count=likes,
            comments_count=comments,
            mentions_product=mentions,
        )

    return _make


@pytest.fixture
def make_influencer():
    def _make(username, *posts, budget=0.0, followers=0):
        return Influencer(
            username=username,
            followers_count=followers,
            budget=budget,
            posts=tuple(posts),
        )

    return _make


@pytest.fixture
def hourly_history():
    """
    Steady pre-campaign traffic: one anonymous order every hour.

    Gives every hour of the day a non-zero baseline so campaign orders of a
    similar size do not register as spikes.
    """

    def _make(end, days=30, total=100.0):
        start = end - timedelta(days=days)
        return [
            Order.create(
                id=f"hist-{n:04d}",
                created_at=start + timedelta(hours=n),
                total_price=total,
            )
            for n in range(days * 24)
        ]

    return _make
