"""Tests for the seasonal baseline."""

from datetime import datetime, timedelta, timezone

import pytest

from postlift.services.baseline import SeasonalBaseline, calculate_seasonal_baseline


class TestCalculateSeasonalBaseline:

    def test_buckets_and_daily_average(self, t0, make_order):
        orders = [
            # Friday 2024-03-01 10:30
            make_order(datetime(2024, 3, 1, 10, 30, tzinfo=timezone.utc), total=70.0),
            # Tuesday 2024-02-27 10:00
            make_order(datetime(2024, 2, 27, 10, 0, tzinfo=timezone.utc), total=35.0),
            # At the reference date: belongs to the campaign, not the baseline
            make_order(t0, total=1000.0),
            # Outside a 7 day lookback
            make_order(t0 - timedelta(days=8), total=500.0),
        ]

        baseline = calculate_seasonal_baseline(orders, reference_date=t0, lookback_days=7)

        assert baseline.order_count == 2
        assert baseline.lookback_days == 7
        assert baseline.daily_average == pytest.approx(15.0)
        assert baseline.by_day_of_week[4] == pytest.approx(70.0)
        assert baseline.by_day_of_week[1] == pytest.approx(35.0)
        assert baseline.by_day_of_week[0] == 0.0
        assert baseline.by_hour_of_day[10] == pytest.approx(15.0)
        assert sum(baseline.by_hour_of_day) == pytest.approx(15.0)

    def test_window_start_is_inclusive(self, t0, make_order):
        orders = [make_order(t0 - timedelta(days=30), total=30.0)]

        baseline = calculate_seasonal_baseline(orders, reference_date=t0, lookback_days=30)

        assert baseline.order_count == 1
        assert baseline.daily_average == pytest.approx(1.0)

    def test_empty_history_gives_zero_baseline(self, t0):
        baseline = calculate_seasonal_baseline([], reference_date=t0)

        assert baseline.daily_average == 0.0
        assert baseline.by_day_of_week == (0.0,) * 7
        assert baseline.by_hour_of_day == (0.0,) * 24
        assert baseline.order_count == 0

    def test_non_positive_lookback_gives_zero_baseline(self, t0, make_order):
        orders = [make_order(t0 - timedelta(hours=1))]

        baseline = calculate_seasonal_baseline(orders, reference_date=t0, lookback_days=0)

        assert baseline.daily_average == 0.0
        assert baseline.order_count == 0

    def test_steady_history(self, t0, hourly_history):
        baseline = calculate_seasonal_baseline(
            hourly_history(t0, days=28, total=10.0),
            reference_date=t0,
            lookback_days=28,
        )

        assert baseline.daily_average == pytest.approx(240.0)
        assert all(v == pytest.approx(10.0) for v in baseline.by_hour_of_day)
        # 28 days is exactly four of each weekday
        assert all(v == pytest.approx(240.0) for v in baseline.by_day_of_week)


class TestSeasonalBaseline:

    def test_expected_hourly_blends_hour_and_weekday(self):
        by_day = [0.0] * 7
        by_day[4] = 48.0
        by_hour = [0.0] * 24
        by_hour[10] = 6.0
        baseline = SeasonalBaseline(
            daily_average=10.0,
            by_day_of_week=tuple(by_day),
            by_hour_of_day=tuple(by_hour),
        )

        friday_10 = datetime(2024, 3, 1, 10, 45, tzinfo=timezone.utc)
        assert baseline.expected_hourly(friday_10) == pytest.approx((6.0 + 2.0) / 2)

        monday_10 = datetime(2024, 3, 4, 10, 0, tzinfo=timezone.utc)
        assert baseline.expected_hourly(monday_10) == pytest.approx(3.0)

    def test_is_sparse(self):
        assert SeasonalBaseline(order_count=3).is_sparse(10)
        assert not SeasonalBaseline(order_count=10).is_sparse(10)
