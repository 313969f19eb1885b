from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, Query

from db.deps import get_aggregate_provider
from schemas.correlation import CorrelationResult, Granularity, MetricDefinitionOut
from services.aggregates import AggregateProvider
from services.correlation_query import compute_correlation
from services.errors import DataAccessFailure, InvalidDateRange, parse_date_range
from services.metric_catalog import list_metrics, metric_keys

router = APIRouter()


@router.get("/correlation/available", response_model=list[MetricDefinitionOut])
def get_available_metrics():
    return [MetricDefinitionOut(**asdict(m)) for m in list_metrics()]


@router.get("/correlation", response_model=CorrelationResult)
def get_correlation(
    user_id: str = Query(..., description="Tenant / user ID"),
    x: str = Query(..., description="Metric key for the x axis"),
    y: str = Query(..., description="Metric key for the y axis"),
    start: str = Query(..., description="Start date (YYYY-MM-DD)"),
    end: str = Query(..., description="End date (YYYY-MM-DD)"),
    granularity: Granularity = Query("day", description="Bucket size: day or week"),
    provider: AggregateProvider = Depends(get_aggregate_provider),
):
    try:
        start_date, end_date = parse_date_range(start, end)
    except InvalidDateRange as exc:
        raise HTTPException(400, detail=str(exc))

    available = metric_keys()
    for axis, key in (("x", x), ("y", y)):
        if key not in available:
            raise HTTPException(
                400,
                detail=f"Invalid {axis} metric: {key}. Must be one of: {', '.join(available)}",
            )

    try:
        return compute_correlation(provider, user_id, x, y, start_date, end_date, granularity)
    except DataAccessFailure:
        raise HTTPException(503, detail="Failed to fetch correlation data.")
