"""
One correlation request end to end: assemble, filter, compute, interpret.
No DB writes; results are request-scoped.
"""
import logging
from datetime import date

from schemas.correlation import CorrelationPoint, CorrelationResult, Granularity
from services.aggregates import AggregateProvider
from services.interpretation import interpret
from services.statistics import approximate_p_value, classify, linear_regression, pearson
from services.time_series import assemble

logger = logging.getLogger(__name__)

MIN_NON_ZERO_POINTS = 3


def select_points_for_statistics(points: list[CorrelationPoint]) -> list[CorrelationPoint]:
    """Drop zero-padding days when at least 3 days carry data; otherwise keep everything."""
    non_zero = [p for p in points if p.x != 0 or p.y != 0]
    return non_zero if len(non_zero) >= MIN_NON_ZERO_POINTS else points


def compute_correlation(
    provider: AggregateProvider,
    tenant: str,
    metric_x: str,
    metric_y: str,
    start_date: date,
    end_date: date,
    granularity: Granularity = "day",
) -> CorrelationResult:
    points = assemble(provider, tenant, metric_x, metric_y, start_date, end_date, granularity)
    sample = select_points_for_statistics(points)
    xs = [p.x for p in sample]
    ys = [p.y for p in sample]
    logger.debug("Computing statistics over %d of %d points", len(sample), len(points))

    raw_r = pearson(xs, ys)
    r = round(raw_r, 4)
    slope, intercept = linear_regression(xs, ys)
    p_value = approximate_p_value(raw_r, len(sample))
    label = classify(r)
    text = interpret(
        metric_x,
        metric_y,
        r,
        slope,
        label,
        points,
        sample_size=len(sample),
        period=granularity,
    )

    return CorrelationResult(
        points=points,
        pearsonR=r,
        pValue=round(p_value, 6),
        slope=round(slope, 4),
        intercept=round(intercept, 4),
        interpretation=label,
        interpretationText=text,
    )
