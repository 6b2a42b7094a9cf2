"""Confidence scoring for attribution runs.

The score itself is simple: the fraction of attributed revenue backed by
strong evidence (temporal proximity, first purchase, product match) rather
than weak evidence (sales spikes, residual engagement allocation). The level
and reasons exist so a report can tell a reader WHY a number is shaky.
"""

from postlift.models import ConfidenceResult, SignalBreakdown
from postlift.services.baseline import SeasonalBaseline


class ConfidenceScorer:
    """
    Grade the confidence of an attribution result.

    Thresholds:
    - HIGH_LEVEL = 0.7, MEDIUM_LEVEL = 0.4 (share of strong-signal revenue)
    - MIN_ORDERS_FOR_CONFIDENT = 10 attributed orders
    """

    HIGH_LEVEL = 0.7
    MEDIUM_LEVEL = 0.4
    MIN_ORDERS_FOR_CONFIDENT = 10

    def __init__(self, min_baseline_orders: int = 10):
        self.min_baseline_orders = min_baseline_orders

    def score(
        self,
        breakdown: SignalBreakdown,
        total_attributed_revenue: float,
        attributed_orders: float,
        baseline: SeasonalBaseline | None = None,
    ) -> ConfidenceResult:
        """
        Score confidence for a whole campaign.

        Args:
            breakdown: Revenue per signal summed over all influencers
            total_attributed_revenue: Sum of influencer revenue
            attributed_orders: Fractional count of orders matched to posts
            baseline: Baseline used for the run, to flag sparse history

        Returns:
            ConfidenceResult; score is 0 when nothing was attributed
        """
        reasons = []

        if total_attributed_revenue <= 0:
            reasons.append("No revenue could be attributed to campaign posts")
            return ConfidenceResult(
                score=0.0,
                level="low",
                reasons=reasons,
                min_orders_met=False,
            )

        score = breakdown.strong / total_attributed_revenue
        score = max(0.0, min(1.0, score))

        reasons.append(
            f"{score:.0%} of attributed revenue backed by temporal, "
            "new-customer or product-match signals"
        )

        if breakdown.baseline > 0:
            reasons.append(
                f"{breakdown.baseline / total_attributed_revenue:.0%} allocated "
                "by engagement share (residual, weakest evidence)"
            )

        if breakdown.anomaly > 0:
            reasons.append(
                f"{breakdown.anomaly / total_attributed_revenue:.0%} tied to "
                "sales spikes above baseline"
            )

        min_orders_met = attributed_orders >= self.MIN_ORDERS_FOR_CONFIDENT
        if not min_orders_met:
            reasons.append(
                f"Low sample: {attributed_orders:.1f} attributed orders "
                f"(need {self.MIN_ORDERS_FOR_CONFIDENT}+)"
            )

        if baseline is not None and baseline.is_sparse(self.min_baseline_orders):
            reasons.append(
                f"Sparse baseline: {baseline.order_count} orders in the "
                f"{baseline.lookback_days}-day lookback"
            )

        if score >= self.HIGH_LEVEL:
            level = "high"
        elif score >= self.MEDIUM_LEVEL:
            level = "medium"
        else:
            level = "low"

        return ConfidenceResult(
            score=score,
            level=level,
            reasons=reasons,
            min_orders_met=min_orders_met,
        )
