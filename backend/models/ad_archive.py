from datetime import date
from typing import Any

from sqlalchemy import Date, Index, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base


class _AdArchiveColumns:
    """Daily snapshot of one ad's platform-reported numbers (spend, conversions, ...)."""

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
    archived_date: Mapped[date] = mapped_column(Date, index=True, nullable=False)
    ad_id: Mapped[str] = mapped_column(String(255), nullable=False)
    ad_data: Mapped[dict[str, Any]] = mapped_column(JSONB, nullable=False)


class FacebookAdArchive(_AdArchiveColumns, Base):
    __tablename__ = "fb_ads_archive"

    __table_args__ = (Index("ix_fb_ads_archive_user_date", "user_id", "archived_date"),)


class TikTokAdArchive(_AdArchiveColumns, Base):
    __tablename__ = "tiktok_ads_archive"

    __table_args__ = (Index("ix_tiktok_ads_archive_user_date", "user_id", "archived_date"),)


class NewsBreakAdArchive(_AdArchiveColumns, Base):
    __tablename__ = "newsbreak_ads_archive"

    __table_args__ = (
        Index("ix_newsbreak_ads_archive_user_date", "user_id", "archived_date"),
    )
