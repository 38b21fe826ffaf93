from typing import Optional

from sqlalchemy import Boolean, CheckConstraint, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from database import Base


DEFAULT_CATEGORY = "Other"


class Transaction(Base):
    __tablename__ = "transactions"

    # Storage order; breaks ties between transactions sharing a date.
    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(36), unique=True, nullable=False)
    # ISO-8601 date or date-time, stored as text so ordering stays lexicographic.
    date: Mapped[str] = mapped_column(String(32), nullable=False)
    card: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    category: Mapped[str] = mapped_column(
        String(100), nullable=False, default=DEFAULT_CATEGORY
    )
    comment: Mapped[Optional[str]] = mapped_column(Text)
    is_income: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_archived: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_duplicate: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    created_at: Mapped[str] = mapped_column(String(32), nullable=False)

    __table_args__ = (
        CheckConstraint("amount >= 0", name="ck_transactions_amount_non_negative"),
        Index("ix_transactions_date", "date"),
        Index("ix_transactions_date_card", "date", "card"),
    )
