"""Attribution result types.

All of these are built fresh for each engine call and never persisted.
`to_dict()` methods round for display; the attributes keep full precision.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class SignalType(str, Enum):
    """Kinds of evidence linking an order to a post."""

    TEMPORAL = "temporal"
    NEW_CUSTOMER = "new_customer"
    PRODUCT_MATCH = "product_match"
    ANOMALY = "anomaly"
    BASELINE = "baseline"


STRONG_SIGNALS = frozenset(
    {SignalType.TEMPORAL, SignalType.NEW_CUSTOMER, SignalType.PRODUCT_MATCH}
)


@dataclass(frozen=True)
class Signal:
    """One piece of evidence for an (order, post) pair."""

    type: SignalType
    confidence: float  # 0.0 - 1.0
    weight: float
    description: str
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def score(self) -> float:
        return self.confidence * self.weight

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "confidence": round(self.confidence, 3),
            "weight": self.weight,
            "description": self.description,
            "data": self.data,
        }


@dataclass
class SignalBreakdown:
    """Attributed revenue split by the signal that backs it."""

    temporal: float = 0.0
    new_customer: float = 0.0
    product_match: float = 0.0
    anomaly: float = 0.0
    baseline: float = 0.0

    def add(self, signal_type: SignalType, amount: float) -> None:
        attr = signal_type.value
        setattr(self, attr, getattr(self, attr) + amount)

    def merge(self, other: "SignalBreakdown") -> None:
        for signal_type in SignalType:
            self.add(signal_type, getattr(other, signal_type.value))

    @property
    def strong(self) -> float:
        """Revenue backed by temporal, novelty or product-match evidence."""
        return self.temporal + self.new_customer + self.product_match

    @property
    def total(self) -> float:
        return self.strong + self.anomaly + self.baseline

    def to_dict(self) -> dict:
        return {
            "temporal": round(self.temporal, 2),
            "new_customer": round(self.new_customer, 2),
            "product_match": round(self.product_match, 2),
            "anomaly": round(self.anomaly, 2),
            "baseline": round(self.baseline, 2),
        }


@dataclass(frozen=True)
class AttributedOrder:
    """A post's share of a single order."""

    order_id: str
    order_total: float
    share: float
    attributed_revenue: float
    confidence: float
    signal_types: tuple[SignalType, ...]

    def to_dict(self) -> dict:
        return {
            "order_id": self.order_id,
            "order_total": round(self.order_total, 2),
            "share": round(self.share, 4),
            "attributed_revenue": round(self.attributed_revenue, 2),
            "confidence": round(self.confidence, 3),
            "signals": [s.value for s in self.signal_types],
        }


@dataclass
class PostAttribution:
    """Everything one post earned during the campaign."""

    post_id: str
    post_timestamp: datetime
    influencer_username: str
    signals: list[Signal] = field(default_factory=list)
    attributed_orders: list[AttributedOrder] = field(default_factory=list)
    total_attributed_revenue: float = 0.0

    @property
    def average_confidence(self) -> float:
        if not self.attributed_orders:
            return 0.0
        return sum(o.confidence for o in self.attributed_orders) / len(
            self.attributed_orders
        )

    def to_dict(self) -> dict:
        return {
            "post_id": self.post_id,
            "post_timestamp": self.post_timestamp.isoformat(),
            "influencer_username": self.influencer_username,
            "signals": [s.to_dict() for s in self.signals],
            "attributed_orders": [o.to_dict() for o in self.attributed_orders],
            "total_attributed_revenue": round(self.total_attributed_revenue, 2),
            "average_confidence": round(self.average_confidence, 3),
        }


@dataclass
class InfluencerAttribution:
    """Roll-up of one influencer's posts plus residual allocation."""

    username: str
    posts: list[PostAttribution] = field(default_factory=list)
    total_attributed_revenue: float = 0.0
    total_attributed_orders: float = 0.0  # fractional, orders can be split
    signals: SignalBreakdown = field(default_factory=SignalBreakdown)

    @property
    def average_confidence(self) -> float:
        orders = [o for post in self.posts for o in post.attributed_orders]
        if not orders:
            return 0.0
        return sum(o.confidence for o in orders) / len(orders)

    @property
    def strong_signal_share(self) -> float:
        if self.total_attributed_revenue <= 0:
            return 0.0
        return min(1.0, self.signals.strong / self.total_attributed_revenue)

    def to_dict(self) -> dict:
        return {
            "username": self.username,
            "posts": [p.to_dict() for p in self.posts],
            "total_attributed_revenue": round(self.total_attributed_revenue, 2),
            "total_attributed_orders": round(self.total_attributed_orders, 2),
            "average_confidence": round(self.average_confidence, 3),
            "signals": self.signals.to_dict(),
        }


@dataclass
class ConfidenceResult:
    """Graded confidence for a whole attribution run."""

    score: float  # 0.0 - 1.0
    level: str  # "low", "medium", "high"
    reasons: list[str]
    min_orders_met: bool

    def to_dict(self) -> dict:
        return {
            "score": round(self.score, 3),
            "level": self.level,
            "reasons": self.reasons,
            "min_orders_met": self.min_orders_met,
        }


@dataclass
class AttributionResult:
    """Top-level output of the attribution engine."""

    influencers: list[InfluencerAttribution]
    total_attributed_revenue: float
    total_attributed_orders: float
    campaign_revenue: float
    campaign_days: int
    baseline_revenue: float
    incremental_revenue: float
    confidence_score: float
    confidence: ConfidenceResult
    methodology: list[str]

    def get_influencer(self, username: str) -> InfluencerAttribution | None:
        for influencer in self.influencers:
            if influencer.username == username:
                return influencer
        return None

    def to_dict(self) -> dict:
        return {
            "influencers": [i.to_dict() for i in self.influencers],
            "total_attributed_revenue": round(self.total_attributed_revenue, 2),
            "total_attributed_orders": round(self.total_attributed_orders, 2),
            "campaign_revenue": round(self.campaign_revenue, 2),
            "campaign_days": self.campaign_days,
            "baseline_revenue": round(self.baseline_revenue, 2),
            "incremental_revenue": round(self.incremental_revenue, 2),
            "confidence_score": round(self.confidence_score, 3),
            "confidence": self.confidence.to_dict(),
            "methodology": self.methodology,
        }
