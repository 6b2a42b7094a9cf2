"""Campaign report built on top of an attribution result."""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from postlift.models import AttributionResult, Influencer


class AttributionTier(str, Enum):
    """How much weight a reader should put on an influencer's numbers."""

    CONFIDENT = "confident"  # Mostly strong evidence, act on it
    HYPOTHESIS = "hypothesis"  # Mostly spikes/residual, don't bet on it
    INSUFFICIENT_DATA = "insufficient_data"  # Nothing attributed


@dataclass
class InfluencerSummary:
    """One influencer's line in the campaign report."""

    username: str
    budget: float
    product_posts: int
    attributed_revenue: float
    attributed_orders: float
    roi_pct: float
    confidence: float
    tier: AttributionTier
    caveats: list[str]

    def to_dict(self) -> dict:
        return {
            "username": self.username,
            "budget": round(self.budget, 2),
            "product_posts": self.product_posts,
            "attributed_revenue": round(self.attributed_revenue, 2),
            "attributed_orders": round(self.attributed_orders, 2),
            "roi_pct": round(self.roi_pct, 1),
            "confidence": round(self.confidence, 3),
            "tier": self.tier.value,
            "caveats": self.caveats,
        }


@dataclass
class CampaignReport:
    """Complete report for a campaign."""

    total_budget: float
    total_attributed_revenue: float
    campaign_revenue: float
    incremental_revenue: float
    roi_pct: float
    confidence_score: float
    confidence_level: str
    summaries: list[InfluencerSummary]
    top_performer: str | None
    notes: list[str]
    methodology: list[str]

    def to_dict(self) -> dict:
        return {
            "total_budget": round(self.total_budget, 2),
            "total_attributed_revenue": round(self.total_attributed_revenue, 2),
            "campaign_revenue": round(self.campaign_revenue, 2),
            "incremental_revenue": round(self.incremental_revenue, 2),
            "roi_pct": round(self.roi_pct, 1),
            "confidence_score": round(self.confidence_score, 3),
            "confidence_level": self.confidence_level,
            "influencers": [s.to_dict() for s in self.summaries],
            "top_performer": self.top_performer,
            "notes": self.notes,
            "methodology": self.methodology,
        }


def roi_pct(revenue: float, budget: float) -> float:
    """(revenue - budget) / budget as a percentage; 0 without a budget."""
    if budget <= 0:
        return 0.0
    return (revenue - budget) / budget * 100


class AttributionReporter:
    """
    Turns an AttributionResult into something a marketer can read.

    Key principles:
    1. Never present residual allocation as hard evidence
    2. Clearly separate "confident" from "hypothesis"
    """

    CONFIDENT_SHARE = 0.7  # strong-signal share of revenue for CONFIDENT

    def build_report(
        self,
        result: AttributionResult,
        influencers: Iterable[Influencer],
    ) -> CampaignReport:
        influencers = list(influencers)
        budgets: dict[str, float] = {}
        post_counts: dict[str, int] = {}
        for influencer in influencers:
            username = influencer.username
            budgets[username] = budgets.get(username, 0.0) + influencer.budget
            post_counts[username] = post_counts.get(username, 0) + len(
                influencer.product_posts
            )

        summaries = []
        for attribution in result.influencers:
            budget = budgets.get(attribution.username, 0.0)
            product_posts = post_counts.get(attribution.username, 0)
            confidence = attribution.strong_signal_share

            if attribution.total_attributed_revenue <= 0:
                tier = AttributionTier.INSUFFICIENT_DATA
            elif confidence >= self.CONFIDENT_SHARE:
                tier = AttributionTier.CONFIDENT
            else:
                tier = AttributionTier.HYPOTHESIS

            summaries.append(
                InfluencerSummary(
                    username=attribution.username,
                    budget=budget,
                    product_posts=product_posts,
                    attributed_revenue=attribution.total_attributed_revenue,
                    attributed_orders=attribution.total_attributed_orders,
                    roi_pct=roi_pct(attribution.total_attributed_revenue, budget),
                    confidence=confidence,
                    tier=tier,
                    caveats=self._build_caveats(
                        attribution.signals.baseline,
                        attribution.total_attributed_revenue,
                        product_posts,
                    ),
                )
            )

        # Highest revenue first, confident tier prioritized
        summaries.sort(
            key=lambda s: (s.tier == AttributionTier.CONFIDENT, s.attributed_revenue),
            reverse=True,
        )

        top_performer = None
        if summaries and summaries[0].attributed_revenue > 0:
            top_performer = summaries[0].username

        total_budget = sum(budgets.values())

        return CampaignReport(
            total_budget=total_budget,
            total_attributed_revenue=result.total_attributed_revenue,
            campaign_revenue=result.campaign_revenue,
            incremental_revenue=result.incremental_revenue,
            roi_pct=roi_pct(result.total_attributed_revenue, total_budget),
            confidence_score=result.confidence_score,
            confidence_level=result.confidence.level,
            summaries=summaries,
            top_performer=top_performer,
            notes=list(result.confidence.reasons),
            methodology=list(result.methodology),
        )

    def _build_caveats(
        self,
        residual_revenue: float,
        total_revenue: float,
        product_posts: int,
    ) -> list[str]:
        caveats = []

        if product_posts == 0:
            caveats.append("No posts flagged as mentioning the product")

        if total_revenue > 0 and residual_revenue / total_revenue >= 0.5:
            caveats.append("Mostly residual allocation by engagement - weak evidence")

        return caveats

    def format_report_text(self, report: CampaignReport) -> str:
        """Format report as human-readable text for email/display."""
        lines = []

        # Header
        lines.append("=" * 60)
        lines.append("POSTLIFT CAMPAIGN ATTRIBUTION REPORT")
        lines.append("=" * 60)
        lines.append("")

        # Summary
        lines.append(f"Campaign Revenue: ${report.campaign_revenue:,.2f}")
        lines.append(f"Incremental Revenue: ${report.incremental_revenue:,.2f}")
        lines.append(f"Attributed Revenue: ${report.total_attributed_revenue:,.2f}")
        if report.total_budget:
            lines.append(f"Budget: ${report.total_budget:,.2f} (ROI {report.roi_pct:+.0f}%)")
        lines.append(
            f"Confidence: {report.confidence_score:.0%} ({report.confidence_level})"
        )
        lines.append("")

        if report.top_performer:
            lines.append(f"TOP PERFORMER: {report.top_performer}")
            lines.append("")

        for tier, title in (
            (AttributionTier.CONFIDENT, "CONFIDENT ATTRIBUTION"),
            (AttributionTier.HYPOTHESIS, "HYPOTHESES (Weak Evidence)"),
            (AttributionTier.INSUFFICIENT_DATA, "NOTHING ATTRIBUTED"),
        ):
            tier_summaries = [s for s in report.summaries if s.tier == tier]
            if not tier_summaries:
                continue
            lines.append("-" * 40)
            lines.append(title)
            lines.append("-" * 40)
            for summary in tier_summaries:
                lines.append(self._format_summary(summary))
            lines.append("")

        if report.notes:
            lines.append("-" * 40)
            lines.append("DATA QUALITY NOTES")
            lines.append("-" * 40)
            for note in report.notes:
                lines.append(f"  {note}")
            lines.append("")

        lines.append("-" * 40)
        lines.append("METHODOLOGY")
        lines.append("-" * 40)
        for step in report.methodology:
            lines.append(f"  - {step}")

        lines.append("=" * 60)

        return "\n".join(lines)

    def _format_summary(self, summary: InfluencerSummary) -> str:
        lines = [
            f"  @{summary.username}: ${summary.attributed_revenue:,.2f} "
            f"from {summary.attributed_orders:.1f} orders"
        ]
        if summary.budget:
            lines.append(
                f"    budget ${summary.budget:,.2f}, ROI {summary.roi_pct:+.0f}%"
            )
        lines.append(f"    confidence {summary.confidence:.0%}")
        for caveat in summary.caveats:
            lines.append(f"    {caveat}")
        return "\n".join(lines)
