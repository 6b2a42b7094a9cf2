"""Tests for the campaign report."""

from datetime import timedelta

import pytest

from postlift.services.attribution import AttributionEngine
from postlift.services.report import AttributionReporter, AttributionTier, roi_pct


@pytest.fixture
def reporter():
    return AttributionReporter()


@pytest.fixture
def campaign_result(t0, make_order, make_post, make_influencer, hourly_history):
    """alice earns on strong evidence, bob only through residual, carol gets nothing."""
    influencers = [
        make_influencer(
            "alice",
            make_post(t0 + timedelta(hours=1), caption="Glow Serum", likes=100),
            budget=100.0,
        ),
        make_influencer(
            "bob",
            make_post(t0 + timedelta(days=6), caption="unrelated", likes=100),
            budget=50.0,
        ),
        make_influencer(
            "carol",
            make_post(t0, caption="Glow Serum", mentions=False),
            budget=80.0,
        ),
    ]
    orders = hourly_history(t0) + [
        make_order(t0 + timedelta(hours=2), total=150.0, email="new@example.com", items=["Glow Serum"]),
        make_order(t0 + timedelta(minutes=30), total=100.0),
    ]

    result = AttributionEngine().compute_attribution(
        orders, influencers, t0, t0 + timedelta(days=7)
    )
    return result, influencers


class TestRoi:

    def test_roi_pct(self):
        assert roi_pct(300.0, 100.0) == pytest.approx(200.0)
        assert roi_pct(50.0, 100.0) == pytest.approx(-50.0)
        assert roi_pct(50.0, 0.0) == 0.0


class TestAttributionReporter:

    def test_tiers_and_ordering(self, reporter, campaign_result):
        result, influencers = campaign_result

        report = reporter.build_report(result, influencers)

        tiers = {s.username: s.tier for s in report.summaries}
        assert tiers == {
            "alice": AttributionTier.CONFIDENT,
            "bob": AttributionTier.HYPOTHESIS,
            "carol": AttributionTier.INSUFFICIENT_DATA,
        }
        assert [s.username for s in report.summaries] == ["alice", "bob", "carol"]
        assert report.top_performer == "alice"

    def test_budget_and_roi(self, reporter, campaign_result):
        result, influencers = campaign_result

        report = reporter.build_report(result, influencers)

        # 150 matched to alice; the 100 before her post is split 50/50 and halved
        alice = report.summaries[0]
        assert alice.attributed_revenue == pytest.approx(175.0)
        assert alice.roi_pct == pytest.approx(75.0)
        assert report.total_budget == pytest.approx(230.0)
        assert report.roi_pct == pytest.approx((200.0 - 230.0) / 230.0 * 100)

    def test_caveats(self, reporter, campaign_result):
        result, influencers = campaign_result

        summaries = {s.username: s for s in reporter.build_report(result, influencers).summaries}

        assert summaries["alice"].caveats == []
        assert summaries["bob"].caveats == [
            "Mostly residual allocation by engagement - weak evidence"
        ]
        assert summaries["carol"].caveats == ["No posts flagged as mentioning the product"]

    def test_nothing_attributed_has_no_top_performer(self, reporter, t0, make_influencer, make_post):
        influencers = [make_influencer("alice", make_post(t0, mentions=None))]
        result = AttributionEngine().compute_attribution([], influencers, t0, t0 + timedelta(days=1))

        report = reporter.build_report(result, influencers)

        assert report.top_performer is None
        assert report.summaries[0].tier is AttributionTier.INSUFFICIENT_DATA

    def test_text_report(self, reporter, campaign_result):
        result, influencers = campaign_result

        text = reporter.format_report_text(reporter.build_report(result, influencers))

        assert "POSTLIFT CAMPAIGN ATTRIBUTION REPORT" in text
        assert "TOP PERFORMER: alice" in text
        assert "CONFIDENT ATTRIBUTION" in text
        assert "HYPOTHESES (Weak Evidence)" in text
        assert "@carol: $0.00 from 0.0 orders" in text
        assert "METHODOLOGY" in text

    def test_to_dict(self, reporter, campaign_result):
        result, influencers = campaign_result

        data = reporter.build_report(result, influencers).to_dict()

        assert data["top_performer"] == "alice"
        assert data["total_attributed_revenue"] == 200.0
        assert [i["tier"] for i in data["influencers"]] == [
            "confident",
            "hypothesis",
            "insufficient_data",
        ]
