"""
Tests for services.time_series — date spine, zero-filling, source selection.
"""

from __future__ import annotations

from datetime import date

import pytest

from services.errors import DataAccessFailure, InvalidDateRange
from services.metric_resolver import SourceDependency
from services.time_series import assemble, date_spine

JAN_1 = date(2026, 1, 1)
JAN_5 = date(2026, 1, 5)


class TestDateSpine:
    def test_inclusive(self) -> None:
        spine = date_spine(JAN_1, JAN_5)
        assert len(spine) == 5
        assert spine[0] == JAN_1 and spine[-1] == JAN_5

    def test_single_day(self) -> None:
        assert date_spine(JAN_1, JAN_1) == [JAN_1]

    def test_crosses_month_boundary(self) -> None:
        assert len(date_spine(date(2026, 1, 30), date(2026, 2, 2))) == 4

    def test_reversed_range_rejected(self) -> None:
        with pytest.raises(InvalidDateRange):
            date_spine(JAN_5, JAN_1)


class TestAssemble:
    def test_missing_day_is_zero_not_gap(self, make_provider, day_series) -> None:
        provider = make_provider(
            {
                SourceDependency.META: day_series(JAN_1, [100, 200, None, 400, 500], "spend"),
                SourceDependency.ORDERS: day_series(JAN_1, [10, 20, 30, 40, 50], "new_revenue"),
            }
        )
        points = assemble(provider, "t1", "meta_spend", "new_revenue", JAN_1, JAN_5)

        assert len(points) == 5
        assert [p.date for p in points] == [
            "2026-01-01",
            "2026-01-02",
            "2026-01-03",
            "2026-01-04",
            "2026-01-05",
        ]
        assert points[2].x == 0.0
        assert points[2].y == 30.0

    def test_empty_provider_still_yields_full_spine(self, make_provider) -> None:
        points = assemble(make_provider(), "t1", "total_spend", "total_revenue", JAN_1, JAN_5)
        assert len(points) == 5
        assert all(p.x == 0.0 and p.y == 0.0 for p in points)

    def test_single_day_range(self, make_provider) -> None:
        points = assemble(make_provider(), "t1", "meta_spend", "aov", JAN_1, JAN_1)
        assert len(points) == 1

    def test_fetches_only_declared_sources(self, make_provider) -> None:
        provider = make_provider()
        assemble(provider, "tenant-9", "meta_spend", "pixel_sessions", JAN_1, JAN_5)
        fetched = {call[0] for call in provider.calls}
        assert fetched == {SourceDependency.META, SourceDependency.PIXEL}
        assert all(call[1:] == ("tenant-9", JAN_1, JAN_5) for call in provider.calls)

    def test_shared_source_fetched_once(self, make_provider) -> None:
        provider = make_provider()
        assemble(provider, "t1", "total_roas", "cpa", JAN_1, JAN_5)
        assert len(provider.calls) == 4

    def test_unknown_metric_fetches_nothing(self, make_provider) -> None:
        provider = make_provider()
        points = assemble(provider, "t1", "bogus", "google_spend", JAN_1, JAN_5)
        assert provider.calls == []
        assert len(points) == 5

    def test_reversed_range_rejected_before_fetching(self, make_provider) -> None:
        provider = make_provider()
        with pytest.raises(InvalidDateRange):
            assemble(provider, "t1", "meta_spend", "aov", JAN_5, JAN_1)
        assert provider.calls == []

    def test_provider_failure_propagates(self, make_provider) -> None:
        provider = make_provider(error=DataAccessFailure("down"))
        with pytest.raises(DataAccessFailure):
            assemble(provider, "t1", "meta_spend", "aov", JAN_1, JAN_5)


class TestWeekGranularity:
    def test_sums_into_iso_weeks(self, make_provider, day_series) -> None:
        # 2026-01-01 is a Thursday: Thu-Sun, then Mon 5th - Sun 11th.
        provider = make_provider({SourceDependency.META: day_series(JAN_1, [10.0] * 11, "spend")})
        points = assemble(
            provider, "t1", "meta_spend", "pixel_sessions", JAN_1, date(2026, 1, 11), granularity="week"
        )
        assert [p.date for p in points] == ["2026-01-01", "2026-01-05"]
        assert [p.x for p in points] == [pytest.approx(40.0), pytest.approx(70.0)]

    def test_ratio_evaluated_on_weekly_sums(self, make_provider) -> None:
        provider = make_provider(
            {
                SourceDependency.ORDERS: {
                    date(2026, 1, 5): {"revenue": 100.0, "conversions": 1.0},
                    date(2026, 1, 6): {"revenue": 300.0, "conversions": 3.0},
                    date(2026, 1, 7): {"revenue": 0.0, "conversions": 0.0},
                }
            }
        )
        points = assemble(provider, "t1", "aov", "new_orders", JAN_5, date(2026, 1, 7), granularity="week")
        assert len(points) == 1
        assert points[0].x == pytest.approx(100.0)
