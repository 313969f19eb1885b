"""
Published metrics that can be plotted against each other.
Built once at import time and never mutated.
"""
from dataclasses import dataclass
from typing import Literal

MetricFormat = Literal["currency", "number", "ratio", "percentage"]


@dataclass(frozen=True)
class MetricDefinition:
    key: str
    label: str
    description: str
    category: str
    format: MetricFormat


METRICS: tuple[MetricDefinition, ...] = (
    MetricDefinition("meta_spend", "Meta Spend", "Total Meta (Facebook/Instagram) ad spend", "Spend", "currency"),
    MetricDefinition("tiktok_spend", "TikTok Spend", "Total TikTok ad spend", "Spend", "currency"),
    MetricDefinition("google_spend", "Google Spend", "Total Google ad spend", "Spend", "currency"),
    MetricDefinition("total_spend", "Total Spend", "Combined ad spend across all platforms", "Spend", "currency"),
    MetricDefinition("total_revenue", "Total Revenue", "Total revenue from all orders", "Revenue", "currency"),
    MetricDefinition("new_revenue", "New Customer Revenue", "Revenue from new customers", "Revenue", "currency"),
    MetricDefinition("returning_revenue", "Returning Customer Revenue", "Revenue from returning customers", "Revenue", "currency"),
    MetricDefinition("total_orders", "Total Orders", "Total number of completed orders", "Orders", "number"),
    MetricDefinition("new_orders", "New Orders", "Orders from new customers", "Orders", "number"),
    MetricDefinition("total_roas", "Total ROAS", "Return on ad spend (revenue / spend)", "Efficiency", "ratio"),
    MetricDefinition("meta_roas", "Meta ROAS", "ROAS for Meta ads", "Efficiency", "ratio"),
    MetricDefinition("tiktok_roas", "TikTok ROAS", "ROAS for TikTok ads", "Efficiency", "ratio"),
    MetricDefinition("cpa", "CPA", "Cost per acquisition (spend / orders)", "Efficiency", "currency"),
    MetricDefinition("ncpa", "nCPA", "New customer acquisition cost", "Efficiency", "currency"),
    MetricDefinition("aov", "AOV", "Average order value", "Orders", "currency"),
    MetricDefinition("pixel_sessions", "Sessions", "Total pixel-tracked sessions", "Traffic", "number"),
    MetricDefinition("pixel_visitors", "Visitors", "Unique pixel-tracked visitors", "Traffic", "number"),
    MetricDefinition("pixel_page_views", "Page Views", "Total pixel-tracked page views", "Traffic", "number"),
)

_BY_KEY: dict[str, MetricDefinition] = {m.key: m for m in METRICS}


def list_metrics() -> list[MetricDefinition]:
    return list(METRICS)


def get_metric(key: str) -> MetricDefinition | None:
    return _BY_KEY.get(key)


def metric_keys() -> list[str]:
    return [m.key for m in METRICS]


def metric_label(key: str) -> str:
    metric = _BY_KEY.get(key)
    return metric.label if metric else key


def metric_format(key: str) -> MetricFormat:
    metric = _BY_KEY.get(key)
    return metric.format if metric else "number"
