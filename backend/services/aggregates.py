"""
Tenant-scoped per-day aggregate sums for each SourceDependency.
Days with no underlying rows are simply absent; the assembler zero-fills them.
"""
import logging
from datetime import date, datetime
from typing import Protocol

from sqlalchemy import Boolean, Date, Numeric, and_, case, cast, distinct, false, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.ad_archive import FacebookAdArchive, NewsBreakAdArchive, TikTokAdArchive
from models.order_archive import OrderArchive
from models.pixel_event import PixelEvent
from services.errors import DataAccessFailure
from services.metric_resolver import SOURCE_FIELDS, SourceDependency

logger = logging.getLogger(__name__)

DailySums = dict[date, dict[str, float]]


class AggregateProvider(Protocol):
    def fetch_daily(
        self,
        source: SourceDependency,
        tenant: str,
        start_date: date,
        end_date: date,
    ) -> DailySums:
        """Return {day -> {field -> summed value}} for [start_date, end_date] inclusive."""
        ...


_AD_TABLES = {
    SourceDependency.META: FacebookAdArchive,
    SourceDependency.TIKTOK: TikTokAdArchive,
    SourceDependency.NEWSBREAK: NewsBreakAdArchive,
}


def _as_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).split("T")[0])


class SqlAggregateProvider:
    """Runs one GROUP BY day query per source against the archive tables."""

    def __init__(self, db: Session):
        self.db = db

    def fetch_daily(
        self,
        source: SourceDependency,
        tenant: str,
        start_date: date,
        end_date: date,
    ) -> DailySums:
        stmt = self._statement(source, tenant, start_date, end_date)
        try:
            rows = self.db.execute(stmt).all()
        except SQLAlchemyError as exc:
            logger.exception("Aggregate query failed for source=%s tenant=%s", source.value, tenant)
            raise DataAccessFailure(f"Failed to load {source.value} aggregates") from exc

        fields = SOURCE_FIELDS[source]
        by_day: DailySums = {}
        for row in rows:
            by_day[_as_date(row.day)] = {
                field: float(getattr(row, field) or 0) for field in fields
            }
        return by_day

    def _statement(self, source, tenant, start_date, end_date):
        if source in _AD_TABLES:
            return _ad_statement(_AD_TABLES[source], tenant, start_date, end_date)
        if source is SourceDependency.ORDERS:
            return _orders_statement(tenant, start_date, end_date)
        if source is SourceDependency.PIXEL:
            return _pixel_statement(tenant, start_date, end_date)
        raise ValueError(f"Unsupported source {source!r}")


def _numeric(payload, key: str):
    return payload[key].astext.cast(Numeric)


def _ad_statement(table, tenant: str, start_date: date, end_date: date):
    payload = table.ad_data
    return (
        select(
            table.archived_date.label("day"),
            func.coalesce(func.sum(_numeric(payload, "spend")), 0).label("spend"),
            func.coalesce(func.sum(_numeric(payload, "conversion_value")), 0).label(
                "conversion_value"
            ),
            func.coalesce(func.sum(_numeric(payload, "conversions")), 0).label("conversions"),
        )
        .where(
            table.user_id == tenant,
            table.archived_date >= start_date,
            table.archived_date <= end_date,
        )
        .group_by(table.archived_date)
        .order_by(table.archived_date)
    )


def _orders_statement(tenant: str, start_date: date, end_date: date):
    payload = OrderArchive.order_data
    completed = and_(
        payload["order_status"].astext == "completed",
        func.coalesce(payload["is_test"].astext.cast(Boolean), false()) == false(),
    )
    is_new = completed & (
        func.coalesce(payload["new_customer"].astext.cast(Boolean), false()).is_(True)
    )
    amount = func.coalesce(_numeric(payload, "subtotal"), _numeric(payload, "revenue"))
    order_id = payload["order_id"].astext
    return (
        select(
            OrderArchive.archived_date.label("day"),
            func.coalesce(func.sum(case((completed, amount), else_=0)), 0).label("revenue"),
            func.count(distinct(case((completed, order_id)))).label("conversions"),
            func.coalesce(func.sum(case((is_new, amount), else_=0)), 0).label("new_revenue"),
            func.count(distinct(case((is_new, order_id)))).label("new_conversions"),
        )
        .where(
            OrderArchive.user_id == tenant,
            OrderArchive.archived_date >= start_date,
            OrderArchive.archived_date <= end_date,
        )
        .group_by(OrderArchive.archived_date)
        .order_by(OrderArchive.archived_date)
    )


def _pixel_statement(tenant: str, start_date: date, end_date: date):
    # Filter and group on the same calendar day.
    event_day = cast(PixelEvent.created_at, Date)
    day_col = event_day.label("day")
    return (
        select(
            day_col,
            func.count(distinct(PixelEvent.session_id)).label("sessions"),
            func.count(distinct(PixelEvent.visitor_id)).label("visitors"),
            func.count().filter(PixelEvent.event_name == "PageView").label("page_views"),
        )
        .where(
            PixelEvent.user_id == tenant,
            event_day >= start_date,
            event_day <= end_date,
        )
        .group_by(day_col)
        .order_by(day_col)
    )
