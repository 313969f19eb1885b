from datetime import date
from typing import Any

from sqlalchemy import Date, Index, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base


class OrderArchive(Base):
    __tablename__ = "orders_archive"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
    archived_date: Mapped[date] = mapped_column(Date, index=True, nullable=False)
    # order_id, order_status, is_test, new_customer, subtotal, revenue
    order_data: Mapped[dict[str, Any]] = mapped_column(JSONB, nullable=False)

    __table_args__ = (Index("ix_orders_archive_user_date", "user_id", "archived_date"),)
