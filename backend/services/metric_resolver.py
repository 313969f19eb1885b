"""
Maps a metric key to a per-day expression plus the aggregated sources it reads.
The table below is the only place metric math lives; the assembler fetches
exactly the declared sources and never builds queries per metric.
"""
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class SourceDependency(str, Enum):
    META = "meta"
    TIKTOK = "tiktok"
    NEWSBREAK = "newsbreak"
    ORDERS = "orders"
    PIXEL = "pixel"


AD_PLATFORMS = (SourceDependency.META, SourceDependency.TIKTOK, SourceDependency.NEWSBREAK)

# Summed numeric fields each source returns per day.
SOURCE_FIELDS: dict[SourceDependency, tuple[str, ...]] = {
    SourceDependency.META: ("spend", "conversion_value", "conversions"),
    SourceDependency.TIKTOK: ("spend", "conversion_value", "conversions"),
    SourceDependency.NEWSBREAK: ("spend", "conversion_value", "conversions"),
    SourceDependency.ORDERS: ("revenue", "conversions", "new_revenue", "new_conversions"),
    SourceDependency.PIXEL: ("sessions", "visitors", "page_views"),
}

DayValues = Mapping[SourceDependency, Mapping[str, float]]
Expression = Callable[[DayValues], float]


@dataclass(frozen=True)
class ResolvedMetric:
    evaluate: Expression
    needs: frozenset[SourceDependency]


def _value(day: DayValues, source: SourceDependency, field: str) -> float:
    """A source/field with no rows for the day reads as 0."""
    return float(day.get(source, {}).get(field, 0.0) or 0.0)


def _ratio(numerator: float, denominator: float) -> float:
    if denominator == 0:
        return 0.0
    return numerator / denominator


def _field(source: SourceDependency, field: str) -> Expression:
    return lambda day: _value(day, source, field)


def _platform_sum(day: DayValues, field: str) -> float:
    return sum(_value(day, source, field) for source in AD_PLATFORMS)


def _total_spend(day: DayValues) -> float:
    return _platform_sum(day, "spend")


def _total_revenue(day: DayValues) -> float:
    # Store and platform attribution disagree; take the larger figure.
    return max(
        _value(day, SourceDependency.ORDERS, "revenue"),
        _platform_sum(day, "conversion_value"),
    )


def _total_orders(day: DayValues) -> float:
    return max(
        _value(day, SourceDependency.ORDERS, "conversions"),
        _platform_sum(day, "conversions"),
    )


def _returning_revenue(day: DayValues) -> float:
    return _value(day, SourceDependency.ORDERS, "revenue") - _value(
        day, SourceDependency.ORDERS, "new_revenue"
    )


def _total_roas(day: DayValues) -> float:
    return _ratio(_total_revenue(day), _total_spend(day))


def _meta_roas(day: DayValues) -> float:
    revenue = max(
        _value(day, SourceDependency.ORDERS, "revenue"),
        _value(day, SourceDependency.META, "conversion_value"),
    )
    return _ratio(revenue, _value(day, SourceDependency.META, "spend"))


def _tiktok_roas(day: DayValues) -> float:
    return _ratio(
        _value(day, SourceDependency.TIKTOK, "conversion_value"),
        _value(day, SourceDependency.TIKTOK, "spend"),
    )


def _cpa(day: DayValues) -> float:
    return _ratio(_total_spend(day), _total_orders(day))


def _ncpa(day: DayValues) -> float:
    return _ratio(_total_spend(day), _value(day, SourceDependency.ORDERS, "new_conversions"))


def _aov(day: DayValues) -> float:
    return _ratio(
        _value(day, SourceDependency.ORDERS, "revenue"),
        _value(day, SourceDependency.ORDERS, "conversions"),
    )


def _zero(day: DayValues) -> float:
    return 0.0


_ORDERS = frozenset({SourceDependency.ORDERS})
_PLATFORMS = frozenset(AD_PLATFORMS)
_PLATFORMS_AND_ORDERS = _PLATFORMS | _ORDERS
_PIXEL = frozenset({SourceDependency.PIXEL})

METRIC_EXPRESSIONS: dict[str, ResolvedMetric] = {
    "meta_spend": ResolvedMetric(
        _field(SourceDependency.META, "spend"), frozenset({SourceDependency.META})
    ),
    "tiktok_spend": ResolvedMetric(
        _field(SourceDependency.TIKTOK, "spend"), frozenset({SourceDependency.TIKTOK})
    ),
    # No Google archive is synced yet.
    "google_spend": ResolvedMetric(_zero, frozenset()),
    "total_spend": ResolvedMetric(_total_spend, _PLATFORMS),
    "total_revenue": ResolvedMetric(_total_revenue, _PLATFORMS_AND_ORDERS),
    "new_revenue": ResolvedMetric(_field(SourceDependency.ORDERS, "new_revenue"), _ORDERS),
    "returning_revenue": ResolvedMetric(_returning_revenue, _ORDERS),
    "total_orders": ResolvedMetric(_total_orders, _PLATFORMS_AND_ORDERS),
    "new_orders": ResolvedMetric(_field(SourceDependency.ORDERS, "new_conversions"), _ORDERS),
    "total_roas": ResolvedMetric(_total_roas, _PLATFORMS_AND_ORDERS),
    "meta_roas": ResolvedMetric(
        _meta_roas, frozenset({SourceDependency.META, SourceDependency.ORDERS})
    ),
    "tiktok_roas": ResolvedMetric(_tiktok_roas, frozenset({SourceDependency.TIKTOK})),
    "cpa": ResolvedMetric(_cpa, _PLATFORMS_AND_ORDERS),
    "ncpa": ResolvedMetric(_ncpa, _PLATFORMS_AND_ORDERS),
    "aov": ResolvedMetric(_aov, _ORDERS),
    "pixel_sessions": ResolvedMetric(_field(SourceDependency.PIXEL, "sessions"), _PIXEL),
    "pixel_visitors": ResolvedMetric(_field(SourceDependency.PIXEL, "visitors"), _PIXEL),
    "pixel_page_views": ResolvedMetric(_field(SourceDependency.PIXEL, "page_views"), _PIXEL),
}

ZERO_METRIC = ResolvedMetric(_zero, frozenset())


def resolve(key: str) -> ResolvedMetric:
    """
    Return the expression and source needs for a metric key.
    Unknown keys resolve to a constant-zero series; callers that need strictness
    validate keys against the catalog first.
    """
    resolved = METRIC_EXPRESSIONS.get(key)
    if resolved is None:
        logger.warning("Unknown metric key %r resolved to constant zero", key)
        return ZERO_METRIC
    return resolved
