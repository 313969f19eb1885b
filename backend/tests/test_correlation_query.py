"""
End-to-end tests for services.correlation_query with an in-memory provider.
"""

from __future__ import annotations

from datetime import date

import pytest

from schemas.correlation import CorrelationPoint
from services.correlation_query import compute_correlation, select_points_for_statistics
from services.errors import DataAccessFailure, InvalidDateRange
from services.metric_resolver import SourceDependency
from services.statistics import approximate_p_value, classify, pearson

JAN_1 = date(2026, 1, 1)

META = SourceDependency.META
ORDERS = SourceDependency.ORDERS


class TestReferenceSeries:
    @pytest.fixture()
    def result(self, make_provider, day_series):
        provider = make_provider(
            {
                META: day_series(JAN_1, [1, 2, 3, 4, 5], "spend"),
                ORDERS: day_series(JAN_1, [2, 4, 6, 8, 10], "new_revenue"),
            }
        )
        return compute_correlation(provider, "t1", "meta_spend", "new_revenue", JAN_1, date(2026, 1, 5))

    def test_perfect_fit(self, result) -> None:
        assert result.pearsonR == 1.0
        assert result.slope == 2.0
        assert result.intercept == 0.0
        assert result.interpretation == "strong_positive"

    def test_significant(self, result) -> None:
        assert result.pValue == pytest.approx(0.0, abs=1e-6)

    def test_points_and_caveat(self, result) -> None:
        assert len(result.points) == 5
        assert "Only 5 data points available." in result.interpretationText

    def test_label_matches_rounded_r(self, result) -> None:
        assert classify(float(str(result.pearsonR))) == result.interpretation

    def test_json_serializable(self, result) -> None:
        payload = result.model_dump(mode="json")
        assert set(payload) == {
            "points",
            "pearsonR",
            "pValue",
            "slope",
            "intercept",
            "interpretation",
            "interpretationText",
        }
        assert payload["points"][0] == {"date": "2026-01-01", "x": 1.0, "y": 2.0}


class TestFiltering:
    def test_zero_days_dropped_from_statistics(self, make_provider, day_series) -> None:
        xs = [100.0, 200.0, 300.0, 400.0]
        ys = [210.0, 390.0, 620.0, 800.0]
        provider = make_provider(
            {
                META: day_series(JAN_1, xs, "spend"),
                ORDERS: day_series(JAN_1, ys, "new_revenue"),
            }
        )
        result = compute_correlation(provider, "t1", "meta_spend", "new_revenue", JAN_1, date(2026, 1, 10))

        assert len(result.points) == 10
        assert result.pearsonR == round(pearson(xs, ys), 4)
        assert "Only 4 data points available." in result.interpretationText

    def test_falls_back_to_all_points(self, make_provider, day_series) -> None:
        provider = make_provider({META: day_series(JAN_1, [100.0, 200.0], "spend")})
        result = compute_correlation(provider, "t1", "meta_spend", "new_revenue", JAN_1, date(2026, 1, 10))
        # ten points, y flat at zero
        assert result.pearsonR == 0.0
        assert result.pValue == 1.0
        assert "Note:" not in result.interpretationText

    def test_select_keeps_point_with_only_y(self) -> None:
        points = [
            CorrelationPoint(date="2026-01-01", x=0, y=5),
            CorrelationPoint(date="2026-01-02", x=1, y=0),
            CorrelationPoint(date="2026-01-03", x=0, y=0),
            CorrelationPoint(date="2026-01-04", x=2, y=2),
        ]
        assert [p.date for p in select_points_for_statistics(points)] == [
            "2026-01-01",
            "2026-01-02",
            "2026-01-04",
        ]


class TestDegenerate:
    def test_all_zero_range(self, make_provider) -> None:
        result = compute_correlation(make_provider(), "t1", "total_spend", "total_revenue", JAN_1, date(2026, 1, 31))
        assert len(result.points) == 31
        assert result.pearsonR == 0.0
        assert result.pValue == 1.0
        assert result.slope == 0.0
        assert result.intercept == 0.0
        assert result.interpretation == "none"

    def test_single_day(self, make_provider, day_series) -> None:
        provider = make_provider({META: day_series(JAN_1, [50.0], "spend")})
        result = compute_correlation(provider, "t1", "meta_spend", "aov", JAN_1, JAN_1)
        assert len(result.points) == 1
        assert result.pearsonR == 0.0
        assert result.pValue == 1.0
        assert "Only 1 data point available." in result.interpretationText

    def test_flat_x_intercept_is_mean_y(self, make_provider, day_series) -> None:
        provider = make_provider(
            {
                META: day_series(JAN_1, [10.0, 10.0, 10.0, 10.0], "spend"),
                ORDERS: day_series(JAN_1, [1.0, 2.0, 3.0, 6.0], "new_revenue"),
            }
        )
        result = compute_correlation(provider, "t1", "meta_spend", "new_revenue", JAN_1, date(2026, 1, 4))
        assert result.slope == 0.0
        assert result.intercept == 3.0
        assert result.pValue == 1.0

    def test_unknown_metric_yields_zero_series(self, make_provider, day_series) -> None:
        provider = make_provider({META: day_series(JAN_1, [1, 2, 3], "spend")})
        result = compute_correlation(provider, "t1", "meta_spend", "mystery", JAN_1, date(2026, 1, 3))
        assert [p.y for p in result.points] == [0.0, 0.0, 0.0]
        assert result.interpretation == "none"


class TestPValueUsesUnroundedR:
    def test_matches_raw_correlation(self, make_provider, day_series) -> None:
        xs = [1.0, 2.0, 3.0, 4.0, 5.0, 6.0]
        ys = [2.0, 1.0, 4.0, 3.0, 7.0, 5.0]
        provider = make_provider(
            {
                META: day_series(JAN_1, xs, "spend"),
                ORDERS: day_series(JAN_1, ys, "new_revenue"),
            }
        )
        result = compute_correlation(provider, "t1", "meta_spend", "new_revenue", JAN_1, date(2026, 1, 6))
        raw_r = pearson(xs, ys)
        assert raw_r != round(raw_r, 4)
        assert result.pValue == round(approximate_p_value(raw_r, 6), 6)
        assert result.interpretation == classify(round(raw_r, 4))


class TestDiminishingReturnsEndToEnd:
    def test_names_split_point_spend(self, make_provider, day_series) -> None:
        spend = [100.0 * (i + 1) for i in range(12)]
        revenue = [3 * s if s <= 600 else 1800 + 1.0 * (s - 600) for s in spend]
        provider = make_provider(
            {
                META: day_series(JAN_1, spend, "spend"),
                ORDERS: day_series(JAN_1, revenue, "revenue"),
            }
        )
        result = compute_correlation(provider, "t1", "meta_spend", "total_revenue", JAN_1, date(2026, 1, 12))
        assert "Diminishing returns appear to begin above $700.00/day" in result.interpretationText


class TestErrors:
    def test_reversed_range(self, make_provider) -> None:
        with pytest.raises(InvalidDateRange):
            compute_correlation(make_provider(), "t1", "meta_spend", "aov", date(2026, 2, 1), JAN_1)

    def test_data_access_failure_is_not_swallowed(self, make_provider) -> None:
        provider = make_provider(error=DataAccessFailure("timeout"))
        with pytest.raises(DataAccessFailure):
            compute_correlation(provider, "t1", "meta_spend", "aov", JAN_1, date(2026, 1, 5))
