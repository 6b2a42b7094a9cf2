"""Tests for CSV imports."""

from datetime import datetime, timezone

import pytest

from postlift.models import LineItem, MentionStatus
from postlift.services.csv_importer import CsvImporter, CsvImportError

SHOPIFY_ORDERS_CSV = b"""Name,Created at,Total,Email,Lineitem name,Lineitem quantity,Lineitem price
#1001,2024-03-04T13:00:00Z,78.00,Ana@Example.com,Glow Serum,1,39.00
#1001,,,,Vitamin Cream,1,39.00
#1002,2024-03-04 15:30:00+00:00,29.00,,Cleansing Balm,2,14.50
,2024-03-04T16:00:00Z,10.00,,Thing,1,10
#1003,not-a-date,10.00,,Thing,1,10
"""

POSTS_CSV = b"""username,post_id,timestamp,caption,likes,comments,mentions_product,followers,budget
@alice,p1,2024-03-04T12:00:00Z,Glow serum love,100,10,true,5000,300
alice,p2,2024-03-05T12:00:00Z,,50,5,,,
bob,p3,2024-03-04T18:00:00Z,Unrelated,20,2,false,800,
bob,p4,,x,1,1,true,,
"""


@pytest.fixture
def importer():
    return CsvImporter()


class TestLoadOrders:

    def test_shopify_export(self, importer):
        orders, report = importer.load_orders(SHOPIFY_ORDERS_CSV)

        assert [o.id for o in orders] == ["#1001", "#1002"]

        first = orders[0]
        assert first.created_at == datetime(2024, 3, 4, 13, 0, tzinfo=timezone.utc)
        assert first.total_price == 78.0
        assert first.customer_email == "ana@example.com"
        assert first.line_items == (
            LineItem(title="Glow Serum", quantity=1, price=39.0),
            LineItem(title="Vitamin Cream", quantity=1, price=39.0),
        )

        second = orders[1]
        assert second.customer_email is None
        assert second.line_items == (LineItem(title="Cleansing Balm", quantity=2, price=14.5),)

        assert report.rows_total == 5
        assert report.rows_imported == 3
        assert report.rows_skipped == 2
        assert [e["row"] for e in report.errors] == [3, 4]

    def test_plain_column_names(self, importer):
        content = b"order_id,created_at,total_price\n1,2024-03-04T12:00:00Z,abc\n"

        orders, report = importer.load_orders(content)

        assert len(orders) == 1
        assert orders[0].total_price == 0.0
        assert orders[0].line_items == ()
        assert report.to_dict()["import_type"] == "orders"

    def test_missing_required_column(self, importer):
        with pytest.raises(CsvImportError, match="created_at"):
            importer.load_orders(b"order_id,total_price\n1,10\n")

    def test_empty_file(self, importer):
        with pytest.raises(CsvImportError):
            importer.load_orders(b"")


class TestLoadInfluencers:

    def test_groups_posts_by_username(self, importer):
        influencers, report = importer.load_influencers(POSTS_CSV)

        assert [i.username for i in influencers] == ["alice", "bob"]

        alice, bob = influencers
        assert alice.followers_count == 5000
        assert alice.budget == 300.0
        assert [p.id for p in alice.posts] == ["p1", "p2"]
        assert alice.posts[0].mentions_product is MentionStatus.MENTIONS
        assert alice.posts[0].likes_count == 100
        assert alice.posts[1].mentions_product is MentionStatus.UNCLASSIFIED
        assert alice.posts[1].caption == ""

        assert bob.budget == 0.0
        assert [p.id for p in bob.posts] == ["p3"]
        assert bob.posts[0].mentions_product is MentionStatus.NO_MENTION

        assert report.rows_imported == 3
        assert report.rows_skipped == 1
        assert report.errors == [{"row": 3, "error": "missing timestamp"}]

    def test_missing_username_column(self, importer):
        with pytest.raises(CsvImportError, match="username"):
            importer.load_influencers(b"post_id,timestamp\np1,2024-03-04T12:00:00Z\n")
