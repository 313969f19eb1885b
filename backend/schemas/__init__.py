from schemas.correlation import (
    CorrelationPoint,
    CorrelationResult,
    Granularity,
    MetricDefinitionOut,
    StrengthLabel,
)

__all__ = [
    "CorrelationPoint",
    "CorrelationResult",
    "Granularity",
    "MetricDefinitionOut",
    "StrengthLabel",
]
