from typing import Literal

from pydantic import BaseModel, ConfigDict

StrengthLabel = Literal[
    "strong_positive",
    "moderate_positive",
    "weak_positive",
    "none",
    "weak_negative",
    "moderate_negative",
    "strong_negative",
]

Granularity = Literal["day", "week"]


class MetricDefinitionOut(BaseModel):
    key: str
    label: str
    description: str
    category: str
    format: Literal["currency", "number", "ratio", "percentage"]


class CorrelationPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: str  # YYYY-MM-DD
    x: float
    y: float


class CorrelationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    points: list[CorrelationPoint]
    pearsonR: float
    pValue: float
    slope: float
    intercept: float
    interpretation: StrengthLabel
    interpretationText: str
