"""Hourly sales spike detection against the seasonal baseline."""

from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from postlift.models import Order
from postlift.services.baseline import SeasonalBaseline
from postlift.services.weights import DEFAULT_WEIGHTS, AttributionWeights


@dataclass(frozen=True)
class AnomalyCheck:
    is_anomaly: bool
    multiplier: float
    z_score: float
    expected: float


def hour_bucket(moment: datetime) -> datetime:
    """Truncate an instant to the start of its hour."""
    return moment.replace(minute=0, second=0, microsecond=0)


def hourly_revenue(orders: Iterable[Order]) -> dict[datetime, float]:
    """Sum order totals per UTC hour."""
    buckets: dict[datetime, float] = defaultdict(float)
    for order in orders:
        buckets[hour_bucket(order.created_at)] += order.total_price
    return dict(buckets)


class AnomalyDetector:
    """
    Flags hours whose revenue is well above what the baseline predicts.

    The standard deviation is modeled as a fixed fraction of the expected
    value (std_ratio, 0.5 by default). That is a heuristic, not a fitted
    variance.
    """

    def __init__(self, weights: AttributionWeights = DEFAULT_WEIGHTS):
        self.weights = weights

    def detect(
        self,
        revenue: float,
        baseline: SeasonalBaseline,
        hour_start: datetime,
    ) -> AnomalyCheck:
        expected = baseline.expected_hourly(hour_start)

        if expected == 0:
            return AnomalyCheck(
                is_anomaly=revenue > 0,
                multiplier=self.weights.anomaly_zero_baseline_multiplier
                if revenue > 0
                else 1.0,
                z_score=0.0,
                expected=0.0,
            )

        std_dev = expected * self.weights.anomaly_std_ratio
        z_score = (revenue - expected) / std_dev if std_dev > 0 else 0.0

        return AnomalyCheck(
            is_anomaly=z_score > self.weights.anomaly_z_threshold,
            multiplier=revenue / expected,
            z_score=z_score,
            expected=expected,
        )

    def anomalous_hours(
        self,
        orders: Iterable[Order],
        baseline: SeasonalBaseline,
    ) -> set[datetime]:
        """Hour starts (UTC) whose realized revenue is anomalous."""
        return {
            hour
            for hour, revenue in hourly_revenue(orders).items()
            if self.detect(revenue, baseline, hour).is_anomaly
        }
