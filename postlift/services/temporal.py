"""Temporal attribution: which decay bucket an order falls in after a post."""

from dataclasses import dataclass
from datetime import datetime

from postlift.services.weights import DEFAULT_DECAY_BUCKETS, DecayBucket


@dataclass(frozen=True)
class TemporalMatch:
    """An order inside a post's influence window."""

    window: str
    weight: float
    hours_after: float
    confidence: float


def classify_temporal(
    order_time: datetime,
    post_time: datetime,
    buckets: tuple[DecayBucket, ...] = DEFAULT_DECAY_BUCKETS,
) -> TemporalMatch | None:
    """
    Place an order in the decay bucket of a post.

    Returns None for orders placed before the post or after the last bucket
    closes. Buckets are inclusive at their upper bound, so an order exactly
    2h after the post is still in "0-2h".
    """
    if not buckets:
        return None

    hours_after = (order_time - post_time).total_seconds() / 3600
    window_hours = buckets[-1].max_hours

    if hours_after < 0 or hours_after > window_hours:
        return None

    for bucket in buckets:
        if hours_after <= bucket.max_hours:
            return TemporalMatch(
                window=bucket.label,
                weight=bucket.weight,
                hours_after=hours_after,
                # Closer to the post means more confident, whatever the bucket
                confidence=1 - hours_after / window_hours,
            )

    return None
