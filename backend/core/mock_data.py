"""
Deterministic mock data for demo mode.

- 90 days of ad, order and pixel data for one demo tenant.
- Meta spend rises by $10/day from $200; revenue tracks ~3x spend up to about
  $650/day and then flattens to ~0.9x per extra dollar, so the Meta Spend vs
  Total Revenue correlation shows diminishing returns.
- NewsBreak has no rows on every 7th day to exercise zero-filled gaps.
"""
import math
from datetime import date, datetime, time, timedelta, timezone

from sqlalchemy.orm import Session

from models import FacebookAdArchive, NewsBreakAdArchive, OrderArchive, PixelEvent, TikTokAdArchive

DEMO_USER_ID = "demo-user"
START_DATE = date(2026, 1, 1)
NUM_DAYS = 90
AVG_ORDER_VALUE = 60.0
SATURATION_SPEND = 650.0


def _day(day_offset: int) -> date:
    return START_DATE + timedelta(days=day_offset)


def _meta_spend(day: int) -> float:
    return 200.0 + 10.0 * day


def _tiktok_spend(day: int) -> float:
    """Deterministic: weekly pattern $110–190."""
    return 150.0 + 40.0 * math.sin(2 * math.pi * day / 7)


def _newsbreak_spend(day: int) -> float | None:
    if day % 7 == 6:
        return None
    return 50.0 + 5.0 * (day % 3)


def _store_revenue(meta_spend: float) -> float:
    if meta_spend <= SATURATION_SPEND:
        return 3.0 * meta_spend
    return 3.0 * SATURATION_SPEND + 0.9 * (meta_spend - SATURATION_SPEND)


def _ad_row(model, day: int, platform: str, spend: float, revenue_share: float, revenue: float):
    conversions = round(revenue * revenue_share / AVG_ORDER_VALUE)
    return model(
        user_id=DEMO_USER_ID,
        archived_date=_day(day),
        ad_id=f"{platform}-ad-1",
        ad_data={
            "spend": round(spend, 2),
            "conversion_value": round(revenue * revenue_share, 2),
            "conversions": conversions,
        },
    )


def _orders(day: int, revenue: float) -> list[OrderArchive]:
    count = max(1, round(revenue / AVG_ORDER_VALUE))
    subtotal = round(revenue / count, 2)
    rows = [
        OrderArchive(
            user_id=DEMO_USER_ID,
            archived_date=_day(day),
            order_data={
                "order_id": f"{day}-{i}",
                "order_status": "completed",
                "is_test": False,
                "new_customer": i % 5 < 2,
                "subtotal": subtotal,
            },
        )
        for i in range(count)
    ]
    # Excluded from every aggregate: one test order and one refunded order per day.
    rows.append(
        OrderArchive(
            user_id=DEMO_USER_ID,
            archived_date=_day(day),
            order_data={
                "order_id": f"{day}-test",
                "order_status": "completed",
                "is_test": True,
                "revenue": 999,
            },
        )
    )
    rows.append(
        OrderArchive(
            user_id=DEMO_USER_ID,
            archived_date=_day(day),
            order_data={"order_id": f"{day}-refund", "order_status": "refunded", "subtotal": 45},
        )
    )
    return rows


def _pixel_event(session_id: str, visitor_id: str, event_name: str, ts: datetime) -> PixelEvent:
    return PixelEvent(
        user_id=DEMO_USER_ID,
        session_id=session_id,
        visitor_id=visitor_id,
        event_name=event_name,
        created_at=ts,
    )


def _pixel_events(day: int) -> list[PixelEvent]:
    """Deterministic: 20–49 sessions, two sessions per visitor, one add-to-cart every 5th."""
    base = datetime.combine(_day(day), time(9, 0), tzinfo=timezone.utc)
    events = []
    for i in range(20 + day // 3):
        ts = base + timedelta(minutes=7 * i)
        session_id = f"s-{day}-{i}"
        visitor_id = f"v-{day}-{i // 2}"
        events.append(_pixel_event(session_id, visitor_id, "PageView", ts))
        if i % 5 == 0:
            events.append(_pixel_event(session_id, visitor_id, "AddToCart", ts + timedelta(minutes=2)))
    return events


def seed_demo_data(db: Session) -> None:
    """Insert deterministic 90-day archives. Idempotent only if tables are empty."""
    for day in range(NUM_DAYS):
        meta_spend = _meta_spend(day)
        revenue = _store_revenue(meta_spend)

        db.add(_ad_row(FacebookAdArchive, day, "meta", meta_spend, 0.6, revenue))
        db.add(_ad_row(TikTokAdArchive, day, "tiktok", _tiktok_spend(day), 0.15, revenue))
        newsbreak_spend = _newsbreak_spend(day)
        if newsbreak_spend is not None:
            db.add(_ad_row(NewsBreakAdArchive, day, "newsbreak", newsbreak_spend, 0.05, revenue))

        db.add_all(_orders(day, revenue))
        db.add_all(_pixel_events(day))
    db.commit()
