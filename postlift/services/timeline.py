"""Hour-by-hour sales timeline for a campaign window."""

from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable

from postlift.models import Influencer, Order
from postlift.models.fields import parse_timestamp
from postlift.services.anomaly import AnomalyDetector, hour_bucket
from postlift.services.baseline import SeasonalBaseline


@dataclass(frozen=True)
class HourlyPoint:
    hour: datetime
    revenue: float
    orders: int
    expected_revenue: float
    is_anomaly: bool
    post_influencer: str | None = None

    def to_dict(self) -> dict:
        return {
            "hour": self.hour.isoformat(),
            "revenue": round(self.revenue, 2),
            "orders": self.orders,
            "expected_revenue": round(self.expected_revenue, 2),
            "is_anomaly": self.is_anomaly,
            "post_influencer": self.post_influencer,
        }


def build_hourly_timeline(
    orders: Iterable[Order],
    influencers: Iterable[Influencer],
    start: datetime,
    end: datetime,
    baseline: SeasonalBaseline,
    detector: AnomalyDetector | None = None,
) -> list[HourlyPoint]:
    """
    One point per UTC hour from start to end, with revenue vs expectation.

    The first point covers the whole hour containing `start`, but only
    orders at or after `start` count towards it, as in attribution.

    Hours with a product post carry the influencer's username (the latest
    post in that hour wins when several land together).
    """
    start = parse_timestamp(start)
    end = parse_timestamp(end)
    detector = detector or AnomalyDetector()

    if end < start:
        return []

    revenue: dict[datetime, float] = defaultdict(float)
    counts: dict[datetime, int] = defaultdict(int)
    for order in orders:
        if start <= order.created_at <= end:
            bucket = hour_bucket(order.created_at)
            revenue[bucket] += order.total_price
            counts[bucket] += 1

    posts_by_hour: dict[datetime, str] = {}
    product_posts = sorted(
        (
            (post.timestamp, influencer.username)
            for influencer in influencers
            for post in influencer.product_posts
        ),
    )
    for timestamp, username in product_posts:
        posts_by_hour[hour_bucket(timestamp)] = username

    points = []
    current = hour_bucket(start)
    while current <= end:
        hour_revenue = revenue.get(current, 0.0)
        check = detector.detect(hour_revenue, baseline, current)
        points.append(
            HourlyPoint(
                hour=current,
                revenue=hour_revenue,
                orders=counts.get(current, 0),
                expected_revenue=baseline.expected_hourly(current),
                is_anomaly=check.is_anomaly,
                post_influencer=posts_by_hour.get(current),
            )
        )
        current += timedelta(hours=1)

    return points
