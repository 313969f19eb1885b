"""
Plain-language summary of a correlation result.
Deterministic text built from the numbers only.
"""
import math
from collections.abc import Sequence

from schemas.correlation import CorrelationPoint, StrengthLabel
from services.metric_catalog import MetricFormat, metric_format, metric_label
from services.statistics import linear_regression

SLOPE_SENTENCE_MIN_ABS_R = 0.3
LOW_SAMPLE_POINTS = 7

# Diminishing-returns heuristic (not a statistical test).
DIMINISHING_MIN_POINTS = 10
DIMINISHING_MIN_HALF_POINTS = 3
DIMINISHING_SLOPE_RATIO = 0.5

CURRENCY_INCREMENT = 100
RATIO_INCREMENT = 0.5
PERCENTAGE_INCREMENT = 10

_STRENGTH_WORDS: dict[str, str] = {
    "strong_positive": "strong positive",
    "moderate_positive": "moderate positive",
    "weak_positive": "weak positive",
    "none": "no significant",
    "weak_negative": "weak negative",
    "moderate_negative": "moderate negative",
    "strong_negative": "strong negative",
}


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def format_metric_value(value: float, fmt: MetricFormat) -> str:
    """Currency drops the sign; increase/decrease wording carries it."""
    if fmt == "currency":
        return f"${abs(value):.2f}"
    if fmt == "ratio":
        return f"{value:.2f}x"
    if fmt == "percentage":
        return f"{value:.1f}%"
    return f"{_round_half_up(value):,}"


def _increment_for(fmt: MetricFormat, xs: Sequence[float]) -> float:
    if fmt == "number":
        x_range = (max(xs) - min(xs)) if xs else 0.0
        return max(1, _round_half_up(x_range / 10))
    if fmt == "ratio":
        return RATIO_INCREMENT
    if fmt == "percentage":
        return PERCENTAGE_INCREMENT
    return CURRENCY_INCREMENT


def _is_spend_outcome_pair(metric_x: str, metric_y: str) -> bool:
    return "spend" in metric_x and ("revenue" in metric_y or "roas" in metric_y)


def diminishing_returns_threshold(points: Sequence[CorrelationPoint]) -> float | None:
    """
    Split points at the median x and regress each half. Return the x value at
    the split when the upper half still rises but at under half the lower slope.
    """
    if len(points) < DIMINISHING_MIN_POINTS:
        return None
    ordered = sorted(points, key=lambda p: p.x)
    mid = len(ordered) // 2
    lower, upper = ordered[:mid], ordered[mid:]
    if len(lower) < DIMINISHING_MIN_HALF_POINTS or len(upper) < DIMINISHING_MIN_HALF_POINTS:
        return None
    lower_slope, _ = linear_regression([p.x for p in lower], [p.y for p in lower])
    upper_slope, _ = linear_regression([p.x for p in upper], [p.y for p in upper])
    if lower_slope > 0 and 0 < upper_slope < lower_slope * DIMINISHING_SLOPE_RATIO:
        return ordered[mid].x
    return None


def interpret(
    metric_x: str,
    metric_y: str,
    r: float,
    slope: float,
    label: StrengthLabel,
    points: Sequence[CorrelationPoint],
    sample_size: int | None = None,
    period: str = "day",
) -> str:
    """
    Build the interpretation text. `sample_size` is the number of points the
    statistics were computed over; defaults to len(points).
    """
    x_label = metric_label(metric_x)
    y_label = metric_label(metric_y)
    x_format = metric_format(metric_x)
    y_format = metric_format(metric_y)
    used = len(points) if sample_size is None else sample_size

    parts = [f"{x_label} and {y_label} show a {_STRENGTH_WORDS[label]} correlation (r={r:.2f})."]

    if abs(r) >= SLOPE_SENTENCE_MIN_ABS_R and slope != 0:
        increment = _increment_for(x_format, [p.x for p in points])
        y_delta = slope * increment
        direction = "increase" if y_delta > 0 else "decrease"
        parts.append(
            f"Every {format_metric_value(increment, x_format)} increase in {x_label} "
            f"correlates with approximately {format_metric_value(abs(y_delta), y_format)} "
            f"{direction} in {y_label}."
        )

    if _is_spend_outcome_pair(metric_x, metric_y):
        threshold = diminishing_returns_threshold(points)
        if threshold is not None:
            parts.append(
                f"Diminishing returns appear to begin above "
                f"{format_metric_value(threshold, x_format)}/{period} based on the scatter pattern."
            )

    if used < LOW_SAMPLE_POINTS:
        plural = "" if used == 1 else "s"
        parts.append(
            f"Note: Only {used} data point{plural} available. "
            "Expand the date range for a more reliable analysis."
        )

    return " ".join(parts)
