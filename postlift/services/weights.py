"""Signal weights and heuristics for the attribution engine.

These are tuning knobs, not values fitted from data. They live here so a
caller (or a test) can pass a modified copy to the engine without touching
the algorithm code:

    weights = replace(DEFAULT_WEIGHTS, residual_discount=0.25)
    engine = AttributionEngine(weights=weights)
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class DecayBucket:
    """A time-since-post interval with its own attribution weight."""

    max_hours: float
    weight: float
    label: str


DEFAULT_DECAY_BUCKETS = (
    DecayBucket(max_hours=2, weight=0.35, label="0-2h"),
    DecayBucket(max_hours=6, weight=0.25, label="2-6h"),
    DecayBucket(max_hours=24, weight=0.15, label="6-24h"),
    DecayBucket(max_hours=48, weight=0.08, label="24-48h"),
)


@dataclass(frozen=True)
class AttributionWeights:
    """All tunable constants used by the attribution pipeline."""

    decay_buckets: tuple[DecayBucket, ...] = field(default=DEFAULT_DECAY_BUCKETS)

    # Corroborating signals (only emitted next to a temporal match)
    new_customer_weight: float = 0.25
    new_customer_confidence: float = 0.8
    product_match_weight: float = 0.30
    product_min_token_length: int = 4

    # Hour-bucket anomaly detection
    anomaly_weight: float = 0.20
    anomaly_confidence: float = 0.7
    anomaly_std_ratio: float = 0.5  # std dev modeled as 50% of expected
    anomaly_z_threshold: float = 2.0
    anomaly_zero_baseline_multiplier: float = 10.0

    # Residual allocation of unmatched revenue by engagement share
    residual_discount: float = 0.5
    comment_engagement_factor: float = 2.0

    # Baseline history
    baseline_lookback_days: int = 30
    min_baseline_orders: int = 10


DEFAULT_WEIGHTS = AttributionWeights()
