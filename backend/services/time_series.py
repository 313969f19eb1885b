"""
Builds the gap-free, day-aligned (x, y) series for two metrics.
Only the sources the two metric expressions declare are fetched.
"""
import logging
from collections import defaultdict
from datetime import date, timedelta

from schemas.correlation import CorrelationPoint, Granularity
from services.aggregates import AggregateProvider, DailySums
from services.errors import check_date_range
from services.metric_resolver import SourceDependency, resolve

logger = logging.getLogger(__name__)


def date_spine(start_date: date, end_date: date) -> list[date]:
    """Every calendar day from start_date to end_date inclusive."""
    check_date_range(start_date, end_date)
    return [start_date + timedelta(days=i) for i in range((end_date - start_date).days + 1)]


def _fetch_sources(
    provider: AggregateProvider,
    needs: set[SourceDependency],
    tenant: str,
    start_date: date,
    end_date: date,
) -> dict[SourceDependency, DailySums]:
    fetched: dict[SourceDependency, DailySums] = {}
    for source in sorted(needs, key=lambda s: s.value):
        fetched[source] = provider.fetch_daily(source, tenant, start_date, end_date)
        logger.debug("Fetched %d day rows for source=%s", len(fetched[source]), source.value)
    return fetched


def _week_buckets(
    spine: list[date],
    fetched: dict[SourceDependency, DailySums],
) -> list[tuple[date, dict[SourceDependency, dict[str, float]]]]:
    """Sum per-day source values into ISO weeks; each bucket is dated at its first spine day."""
    order: list[date] = []
    first_day: dict[date, date] = {}
    sums: dict[date, dict[SourceDependency, dict[str, float]]] = {}
    for day in spine:
        week_start = day - timedelta(days=day.weekday())
        if week_start not in sums:
            order.append(week_start)
            first_day[week_start] = day
            sums[week_start] = {source: defaultdict(float) for source in fetched}
        for source, by_day in fetched.items():
            for field, value in by_day.get(day, {}).items():
                sums[week_start][source][field] += value
    return [(first_day[week], sums[week]) for week in order]


def assemble(
    provider: AggregateProvider,
    tenant: str,
    metric_x: str,
    metric_y: str,
    start_date: date,
    end_date: date,
    granularity: Granularity = "day",
) -> list[CorrelationPoint]:
    """
    Return one point per spine day (or per ISO week for granularity="week"),
    ascending by date. Missing source rows contribute 0, never a gap.
    Provider failures propagate unchanged.
    """
    spine = date_spine(start_date, end_date)
    x_metric = resolve(metric_x)
    y_metric = resolve(metric_y)
    needs = set(x_metric.needs) | set(y_metric.needs)

    fetched = _fetch_sources(provider, needs, tenant, start_date, end_date)

    if granularity == "week":
        buckets = _week_buckets(spine, fetched)
    else:
        buckets = [
            (day, {source: by_day.get(day, {}) for source, by_day in fetched.items()})
            for day in spine
        ]

    points = [
        CorrelationPoint(
            date=bucket_date.isoformat(),
            x=x_metric.evaluate(values),
            y=y_metric.evaluate(values),
        )
        for bucket_date, values in buckets
    ]
    logger.info(
        "Assembled %d %s points for tenant=%s x=%s y=%s range=%s..%s",
        len(points),
        granularity,
        tenant,
        metric_x,
        metric_y,
        start_date,
        end_date,
    )
    return points
