"""Tests for domain records and field parsers."""

from datetime import datetime, timedelta, timezone

import pytest

from postlift.models import Influencer, LineItem, MentionStatus, Order, Post
from postlift.models.fields import (
    normalize_email,
    parse_count,
    parse_price,
    parse_timestamp,
)


# =============================================================================
# FIELD PARSERS
# =============================================================================

class TestParsePrice:

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("49.90", 49.90),
            ("1,299.00", 1299.0),
            (" 12 ", 12.0),
            (39, 39.0),
            (12.5, 12.5),
        ],
    )
    def test_valid_prices(self, raw, expected):
        assert parse_price(raw) == pytest.approx(expected)

    @pytest.mark.parametrize(
        "raw",
        [None, "", "abc", "12,5,x", "-10.00", -3, float("nan"), "inf", True],
    )
    def test_invalid_prices_become_zero(self, raw):
        assert parse_price(raw) == 0.0


class TestParseTimestamp:

    def test_trailing_z_is_utc(self):
        parsed = parse_timestamp("2024-03-04T12:30:00Z")
        assert parsed == datetime(2024, 3, 4, 12, 30, tzinfo=timezone.utc)
        assert parsed.utcoffset() == timedelta(0)

    def test_offset_is_converted_to_utc(self):
        parsed = parse_timestamp("2024-03-04T14:30:00+02:00")
        assert parsed.hour == 12
        assert parsed.utcoffset() == timedelta(0)

    def test_naive_is_taken_as_utc(self):
        parsed = parse_timestamp(datetime(2024, 3, 4, 12, 0))
        assert parsed.tzinfo is not None
        assert parsed == datetime(2024, 3, 4, 12, 0, tzinfo=timezone.utc)

    def test_garbage_raises(self):
        with pytest.raises(ValueError):
            parse_timestamp("yesterday-ish")


class TestSmallParsers:

    def test_normalize_email(self):
        assert normalize_email("  Ana@Example.COM ") == "ana@example.com"
        assert normalize_email("") is None
        assert normalize_email("   ") is None
        assert normalize_email(None) is None

    def test_parse_count(self):
        assert parse_count("42") == 42
        assert parse_count("7.0") == 7
        assert parse_count(-5) == 0
        assert parse_count("n/a") == 0
        assert parse_count(None) == 0


# =============================================================================
# ORDERS
# =============================================================================

class TestOrder:

    def test_create_normalizes_fields(self):
        order = Order.create(
            id=1001,
            created_at="2024-03-04T12:00:00Z",
            total_price="not a price",
            customer_email=" Buyer@Shop.io ",
        )

        assert order.id == "1001"
        assert order.total_price == 0.0
        assert order.customer_email == "buyer@shop.io"
        assert order.line_items == ()

    def test_plain_constructor_normalizes_fields(self):
        order = Order(
            id=7,
            created_at=datetime(2024, 3, 4, 13, 0),
            total_price="abc",
            customer_email=" Buyer@Shop.io ",
            line_items=[LineItem(title="Glow Serum", quantity="2", price="-5")],
        )

        assert order.id == "7"
        assert order.created_at == datetime(2024, 3, 4, 13, 0, tzinfo=timezone.utc)
        assert order.created_at.utcoffset() == timedelta(0)
        assert order.total_price == 0.0
        assert order.customer_email == "buyer@shop.io"
        assert order.line_items == (LineItem(title="Glow Serum", quantity=2, price=0.0),)

    def test_from_shopify_prefers_customer_email(self):
        order = Order.from_shopify(
            {
                "id": 5551,
                "created_at": "2024-03-04T09:15:00-05:00",
                "total_price": "78.00",
                "email": "order-level@example.com",
                "customer": {"email": "Customer@Example.com"},
                "line_items": [
                    {"title": "Glow Serum", "quantity": 2, "price": "39.00"},
                ],
            }
        )

        assert order.id == "5551"
        assert order.created_at == datetime(2024, 3, 4, 14, 15, tzinfo=timezone.utc)
        assert order.total_price == 78.0
        assert order.customer_email == "customer@example.com"
        assert order.line_items == (LineItem(title="Glow Serum", quantity=2, price=39.0),)

    def test_from_shopify_falls_back_to_order_email(self):
        order = Order.from_shopify(
            {
                "id": "5552",
                "created_at": "2024-03-04T12:00:00Z",
                "total_price": "10.00",
                "email": "guest@example.com",
                "customer": None,
            }
        )

        assert order.customer_email == "guest@example.com"
        assert order.line_items == ()


# =============================================================================
# POSTS AND INFLUENCERS
# =============================================================================

class TestMentionStatus:

    @pytest.mark.parametrize(
        "flag,expected",
        [
            (True, MentionStatus.MENTIONS),
            (False, MentionStatus.NO_MENTION),
            (None, MentionStatus.UNCLASSIFIED),
            ("true", MentionStatus.MENTIONS),
            ("YES", MentionStatus.MENTIONS),
            ("1", MentionStatus.MENTIONS),
            ("false", MentionStatus.NO_MENTION),
            ("0", MentionStatus.NO_MENTION),
            ("maybe", MentionStatus.UNCLASSIFIED),
            (MentionStatus.NO_MENTION, MentionStatus.NO_MENTION),
        ],
    )
    def test_from_flag(self, flag, expected):
        assert MentionStatus.from_flag(flag) is expected


class TestInfluencer:

    def test_only_mentioning_posts_are_product_posts(self, t0):
        posts = (
            Post.create(id="a", timestamp=t0, mentions_product=True, likes_count=100, comments_count=10),
            Post.create(id="b", timestamp=t0, mentions_product=False, likes_count=500),
            Post.create(id="c", timestamp=t0, mentions_product=None, likes_count=900),
        )
        influencer = Influencer(username="alice", posts=posts)

        assert [p.id for p in influencer.product_posts] == ["a"]
        assert influencer.engagement() == 120.0
        assert influencer.engagement(comment_factor=0) == 100.0

    def test_post_create_cleans_counters(self, t0):
        post = Post.create(id=7, timestamp=t0, caption=None, likes_count="12", comments_count="x")

        assert post.id == "7"
        assert post.caption == ""
        assert post.likes_count == 12
        assert post.comments_count == 0
        assert post.mentions_product is MentionStatus.UNCLASSIFIED
        assert not post.is_product_post

    def test_post_plain_constructor_normalizes_fields(self):
        post = Post(
            id=8,
            timestamp="2024-03-04T14:00:00+02:00",
            caption=None,
            likes_count="15",
            comments_count=-3,
            mentions_product=True,
        )

        assert post.id == "8"
        assert post.timestamp == datetime(2024, 3, 4, 12, 0, tzinfo=timezone.utc)
        assert post.caption == ""
        assert post.likes_count == 15
        assert post.comments_count == 0
        assert post.mentions_product is MentionStatus.MENTIONS
        assert post.is_product_post
