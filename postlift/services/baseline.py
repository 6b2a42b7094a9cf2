"""Seasonal revenue baseline.

The baseline window ends at the reference date (the campaign start), so
campaign revenue never leaks into the "expected" numbers it is compared with.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Iterable

from postlift.models import Order
from postlift.models.fields import parse_timestamp


@dataclass(frozen=True)
class SeasonalBaseline:
    """Expected revenue per day, per weekday occurrence and per hour of day."""

    daily_average: float = 0.0
    by_day_of_week: tuple[float, ...] = field(default=(0.0,) * 7)  # Monday = 0
    by_hour_of_day: tuple[float, ...] = field(default=(0.0,) * 24)
    order_count: int = 0
    lookback_days: int = 0

    def expected_hourly(self, moment: datetime) -> float:
        """Expected revenue for the UTC hour containing `moment`."""
        moment = parse_timestamp(moment)
        by_hour = self.by_hour_of_day[moment.hour]
        by_day = self.by_day_of_week[moment.weekday()] / 24
        return (by_hour + by_day) / 2

    def is_sparse(self, min_orders: int) -> bool:
        return self.order_count < min_orders

    def to_dict(self) -> dict:
        return {
            "daily_average": round(self.daily_average, 2),
            "by_day_of_week": [round(v, 2) for v in self.by_day_of_week],
            "by_hour_of_day": [round(v, 2) for v in self.by_hour_of_day],
            "order_count": self.order_count,
            "lookback_days": self.lookback_days,
        }


def calculate_seasonal_baseline(
    orders: Iterable[Order],
    reference_date: datetime,
    lookback_days: int = 30,
) -> SeasonalBaseline:
    """
    Build the baseline from orders in [reference_date - lookback, reference_date).

    Args:
        orders: Full order history (anything outside the window is ignored)
        reference_date: End of the baseline window, usually the campaign start
        lookback_days: Days of history to average over

    Returns:
        SeasonalBaseline. Buckets with no orders stay at 0; there is no
        smoothing, so sparse history gives a noisy baseline.
    """
    if lookback_days <= 0:
        return SeasonalBaseline(lookback_days=max(lookback_days, 0))

    window_end = parse_timestamp(reference_date)
    window_start = window_end - timedelta(days=lookback_days)

    total_revenue = 0.0
    order_count = 0
    by_day = [0.0] * 7
    by_hour = [0.0] * 24

    for order in orders:
        if not (window_start <= order.created_at < window_end):
            continue
        total_revenue += order.total_price
        by_day[order.created_at.weekday()] += order.total_price
        by_hour[order.created_at.hour] += order.total_price
        order_count += 1

    weeks_in_period = lookback_days / 7

    return SeasonalBaseline(
        daily_average=total_revenue / lookback_days,
        by_day_of_week=tuple(v / weeks_in_period for v in by_day),
        by_hour_of_day=tuple(v / lookback_days for v in by_hour),
        order_count=order_count,
        lookback_days=lookback_days,
    )
