"""Attribution service - the core analytics engine.

Attributes campaign revenue to influencer posts without promo codes, UTM
links or pixels:
- Temporal proximity to a product post (bucketed decay)
- Corroborating evidence: first purchase, product named in the caption
- Sales spikes above a seasonal baseline
- Proportional split when several posts compete for one order
- Residual allocation of unmatched revenue by engagement share

The engine is a pure function of its inputs: no I/O, no clock, no caching.
"""

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from postlift.logging_config import get_logger
from postlift.models import (
    AttributedOrder,
    AttributionResult,
    Influencer,
    InfluencerAttribution,
    Order,
    Post,
    PostAttribution,
    Signal,
    SignalBreakdown,
    SignalType,
)
from postlift.models.fields import parse_timestamp
from postlift.services.anomaly import AnomalyDetector, hour_bucket
from postlift.services.baseline import SeasonalBaseline, calculate_seasonal_baseline
from postlift.services.confidence import ConfidenceScorer
from postlift.services.novelty import CustomerHistory
from postlift.services.product_match import match_product_mention
from postlift.services.temporal import classify_temporal
from postlift.services.weights import DEFAULT_WEIGHTS, AttributionWeights

logger = get_logger(__name__)


@dataclass
class _Candidate:
    """A post competing for one order."""

    post: Post
    username: str
    signals: list[Signal]

    @property
    def score(self) -> float:
        return sum(s.score for s in self.signals)


def split_by_signal(
    revenue: float, signals: list[Signal]
) -> list[tuple[SignalType, float]]:
    """
    Split a post's revenue for one order across the signals backing it.

    Each signal, anomaly included, gets a slice proportional to
    confidence x weight, so the slices always add back up to `revenue` and an
    influencer's signal breakdown always equals its attributed revenue.
    """
    if not signals:
        return []

    total = sum(s.score for s in signals)
    if total > 0:
        return [(s.type, revenue * s.score / total) for s in signals]
    return [(s.type, revenue / len(signals)) for s in signals]


def order_confidence(signals: list[Signal]) -> float:
    """Weight-averaged confidence of the signals tying an order to a post."""
    total_weight = sum(s.weight for s in signals)
    if total_weight <= 0:
        return 0.0
    return sum(s.score for s in signals) / total_weight


def campaign_days(campaign_start: datetime, campaign_end: datetime) -> int:
    """Whole days covered by the campaign, rounded up; 0 for empty windows."""
    if campaign_end <= campaign_start:
        return 0
    return math.ceil((campaign_end - campaign_start).total_seconds() / 86400)


class AttributionEngine:
    """
    Multi-signal attribution of orders to influencer posts.

    Only posts flagged MentionStatus.MENTIONS take part. An order is matched
    to every product post it follows within the influence window; its revenue
    is split between those posts in proportion to their signal scores.
    """

    def __init__(self, weights: AttributionWeights = DEFAULT_WEIGHTS):
        self.weights = weights
        self.anomaly_detector = AnomalyDetector(weights)
        self.confidence_scorer = ConfidenceScorer(weights.min_baseline_orders)

    def calculate_baseline(
        self,
        orders: Iterable[Order],
        baseline_end: datetime,
    ) -> SeasonalBaseline:
        """Baseline over the lookback window ending at `baseline_end`."""
        return calculate_seasonal_baseline(
            orders,
            reference_date=baseline_end,
            lookback_days=self.weights.baseline_lookback_days,
        )

    def compute_attribution(
        self,
        orders: Iterable[Order],
        influencers: Iterable[Influencer],
        campaign_start: datetime,
        campaign_end: datetime,
    ) -> AttributionResult:
        """
        Attribute campaign revenue to influencers.

        Args:
            orders: Full order history (baseline and novelty look before the
                campaign; attribution only uses orders inside it)
            influencers: Campaign influencers with their scraped posts
            campaign_start: Start of the campaign window (inclusive)
            campaign_end: End of the campaign window (inclusive)

        Returns:
            AttributionResult with per-influencer roll-ups, lift and confidence
        """
        orders = list(orders)
        influencers = list(influencers)
        start = parse_timestamp(campaign_start)
        end = parse_timestamp(campaign_end)

        baseline = self.calculate_baseline(orders, baseline_end=start)
        campaign_orders = [o for o in orders if start <= o.created_at <= end]
        product_posts = self._collect_product_posts(influencers)
        history = CustomerHistory(orders)
        anomaly_hours = self.anomaly_detector.anomalous_hours(campaign_orders, baseline)

        results: dict[str, InfluencerAttribution] = {}
        for influencer in influencers:
            results.setdefault(
                influencer.username,
                InfluencerAttribution(username=influencer.username),
            )
        post_results: dict[tuple[str, str], PostAttribution] = {}

        unattributed_revenue = 0.0
        unattributed_count = 0

        for order in campaign_orders:
            candidates = self._score_order(order, product_posts, history)
            if not candidates:
                unattributed_revenue += order.total_price
                unattributed_count += 1
                continue

            self._distribute_order(
                order,
                candidates,
                in_anomaly_hour=hour_bucket(order.created_at) in anomaly_hours,
                results=results,
                post_results=post_results,
            )

        self._allocate_residual(unattributed_revenue, influencers, results)

        result = self._aggregate(
            list(results.values()),
            campaign_orders,
            baseline,
            start,
            end,
        )

        logger.debug(
            "attribution_computed",
            campaign_orders=len(campaign_orders),
            product_posts=len(product_posts),
            unattributed_orders=unattributed_count,
            anomaly_hours=len(anomaly_hours),
            total_attributed_revenue=round(result.total_attributed_revenue, 2),
            confidence_score=round(result.confidence_score, 3),
        )

        return result

    def _collect_product_posts(
        self, influencers: list[Influencer]
    ) -> list[tuple[Post, str]]:
        """All product posts with their influencer, oldest first."""
        product_posts = [
            (post, influencer.username)
            for influencer in influencers
            for post in influencer.product_posts
        ]
        product_posts.sort(key=lambda item: (item[0].timestamp, item[0].id))
        return product_posts

    def _score_order(
        self,
        order: Order,
        product_posts: list[tuple[Post, str]],
        history: CustomerHistory,
    ) -> list[_Candidate]:
        """Build the signal set of every post plausibly behind this order."""
        is_new = history.is_new_customer(order)
        candidates = []

        for post, username in product_posts:
            temporal = classify_temporal(
                order.created_at, post.timestamp, self.weights.decay_buckets
            )
            # No temporal plausibility, no attribution: the other signals
            # only corroborate.
            if temporal is None:
                continue

            signals = [
                Signal(
                    type=SignalType.TEMPORAL,
                    confidence=temporal.confidence,
                    weight=temporal.weight,
                    description=(
                        f"Purchase {temporal.hours_after:.1f}h after the post "
                        f"({temporal.window})"
                    ),
                    data={
                        "hours_after": round(temporal.hours_after, 2),
                        "window": temporal.window,
                    },
                )
            ]

            if is_new:
                signals.append(
                    Signal(
                        type=SignalType.NEW_CUSTOMER,
                        confidence=self.weights.new_customer_confidence,
                        weight=self.weights.new_customer_weight,
                        description="Customer's first purchase",
                    )
                )

            product_match = match_product_mention(
                order.line_items,
                post.caption,
                self.weights.product_min_token_length,
            )
            if product_match.matches:
                signals.append(
                    Signal(
                        type=SignalType.PRODUCT_MATCH,
                        confidence=product_match.confidence,
                        weight=self.weights.product_match_weight,
                        description=(
                            "Mentioned product purchased: "
                            + ", ".join(product_match.matched_products)
                        ),
                        data={"matched_products": product_match.matched_products},
                    )
                )

            candidates.append(_Candidate(post=post, username=username, signals=signals))

        return candidates

    def _distribute_order(
        self,
        order: Order,
        candidates: list[_Candidate],
        in_anomaly_hour: bool,
        results: dict[str, InfluencerAttribution],
        post_results: dict[tuple[str, str], PostAttribution],
    ) -> None:
        """Split one order's revenue across its candidate posts."""
        total_score = sum(c.score for c in candidates)

        for candidate in candidates:
            if total_score > 0:
                share = candidate.score / total_score
            else:
                share = 1 / len(candidates)

            if share <= 0:
                continue

            attributed_revenue = order.total_price * share
            signals = list(candidate.signals)

            # Bookkeeping only: the share above is already fixed.
            if in_anomaly_hour:
                signals.append(
                    Signal(
                        type=SignalType.ANOMALY,
                        confidence=self.weights.anomaly_confidence,
                        weight=self.weights.anomaly_weight,
                        description="Unusual sales spike detected in this hour",
                        data={"hour": hour_bucket(order.created_at).isoformat()},
                    )
                )

            influencer = results[candidate.username]
            influencer.total_attributed_revenue += attributed_revenue
            influencer.total_attributed_orders += share
            for signal_type, amount in split_by_signal(attributed_revenue, signals):
                influencer.signals.add(signal_type, amount)

            key = (candidate.username, candidate.post.id)
            post_attribution = post_results.get(key)
            if post_attribution is None:
                post_attribution = PostAttribution(
                    post_id=candidate.post.id,
                    post_timestamp=candidate.post.timestamp,
                    influencer_username=candidate.username,
                )
                post_results[key] = post_attribution
                influencer.posts.append(post_attribution)

            post_attribution.signals.extend(signals)
            post_attribution.total_attributed_revenue += attributed_revenue
            post_attribution.attributed_orders.append(
                AttributedOrder(
                    order_id=order.id,
                    order_total=order.total_price,
                    share=share,
                    attributed_revenue=attributed_revenue,
                    confidence=order_confidence(signals),
                    signal_types=tuple(s.type for s in signals),
                )
            )

    def _allocate_residual(
        self,
        unattributed_revenue: float,
        influencers: list[Influencer],
        results: dict[str, InfluencerAttribution],
    ) -> None:
        """
        Spread unmatched revenue by engagement share, discounted.

        This is the weakest evidence in the model, hence the discount
        (residual_discount, 0.5 by default).
        """
        if unattributed_revenue <= 0:
            return

        engagement: dict[str, float] = {}
        for influencer in influencers:
            engagement[influencer.username] = engagement.get(
                influencer.username, 0.0
            ) + influencer.engagement(self.weights.comment_engagement_factor)

        total_engagement = sum(engagement.values())
        if total_engagement <= 0:
            logger.debug(
                "residual_allocation_skipped",
                unattributed_revenue=round(unattributed_revenue, 2),
                reason="no engagement on product posts",
            )
            return

        for username, value in engagement.items():
            allocation = (
                unattributed_revenue
                * (value / total_engagement)
                * self.weights.residual_discount
            )
            result = results[username]
            result.total_attributed_revenue += allocation
            result.signals.add(SignalType.BASELINE, allocation)

    def _aggregate(
        self,
        influencer_results: list[InfluencerAttribution],
        campaign_orders: list[Order],
        baseline: SeasonalBaseline,
        start: datetime,
        end: datetime,
    ) -> AttributionResult:
        """Roll influencer results up into campaign totals."""
        breakdown = SignalBreakdown()
        for result in influencer_results:
            breakdown.merge(result.signals)

        total_revenue = sum(r.total_attributed_revenue for r in influencer_results)
        total_orders = sum(r.total_attributed_orders for r in influencer_results)
        campaign_revenue = sum(o.total_price for o in campaign_orders)

        days = campaign_days(start, end)
        expected_revenue = baseline.daily_average * days
        incremental_revenue = max(0.0, campaign_revenue - expected_revenue)

        confidence = self.confidence_scorer.score(
            breakdown,
            total_attributed_revenue=total_revenue,
            attributed_orders=total_orders,
            baseline=baseline,
        )

        return AttributionResult(
            influencers=influencer_results,
            total_attributed_revenue=total_revenue,
            total_attributed_orders=total_orders,
            campaign_revenue=campaign_revenue,
            campaign_days=days,
            baseline_revenue=expected_revenue,
            incremental_revenue=incremental_revenue,
            confidence_score=confidence.score,
            confidence=confidence,
            methodology=self.methodology(),
        )

    def methodology(self) -> list[str]:
        windows = ", ".join(b.label for b in self.weights.decay_buckets)
        return [
            f"Temporal correlation ({windows})",
            "New customer detection",
            "Mentioned/purchased product matching",
            "Sales anomaly detection (hourly spikes)",
            "Seasonal adjustment (day of week / hour of day)",
            "Residual baseline attribution by engagement",
        ]


def compute_attribution(
    orders: Iterable[Order],
    influencers: Iterable[Influencer],
    campaign_start: datetime,
    campaign_end: datetime,
    weights: AttributionWeights = DEFAULT_WEIGHTS,
) -> AttributionResult:
    """Functional entry point: see AttributionEngine.compute_attribution."""
    return AttributionEngine(weights).compute_attribution(
        orders, influencers, campaign_start, campaign_end
    )
