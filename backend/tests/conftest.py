"""Shared fixtures: an in-memory aggregate provider standing in for the database."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from services.metric_resolver import SourceDependency


class FakeAggregateProvider:
    """Serves pre-built {source -> {day -> {field -> value}}} sums and records each call."""

    def __init__(self, data=None, error: Exception | None = None) -> None:
        self.data = data or {}
        self.error = error
        self.calls: list[tuple[SourceDependency, str, date, date]] = []

    def fetch_daily(self, source, tenant, start_date, end_date):
        self.calls.append((source, tenant, start_date, end_date))
        if self.error is not None:
            raise self.error
        return {
            day: dict(values)
            for day, values in self.data.get(source, {}).items()
            if start_date <= day <= end_date
        }


def daily(start: date, values: list[float | None], field: str) -> dict[date, dict[str, float]]:
    """{day -> {field: value}} for consecutive days; None leaves the day without rows."""
    return {
        start + timedelta(days=i): {field: value}
        for i, value in enumerate(values)
        if value is not None
    }


@pytest.fixture()
def make_provider():
    return FakeAggregateProvider


@pytest.fixture()
def day_series():
    return daily
