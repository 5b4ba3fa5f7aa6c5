from datetime import date, datetime

from sqlalchemy import Date, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.database import Base

PAYMENT_STATUSES = {"paid", "pending", "partial", "overdue"}


class RentPayment(Base):
    __tablename__ = "rent_payments"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    tenant_id: Mapped[str] = mapped_column(ForeignKey("profiles.id"), nullable=False, index=True)
    house_id: Mapped[int] = mapped_column(ForeignKey("houses.id"), nullable=False, index=True)
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    payment_method: Mapped[str | None] = mapped_column(String(50))
    payment_reference: Mapped[str | None] = mapped_column(String(200))
    payment_date: Mapped[date] = mapped_column(Date, nullable=False, default=date.today)
    month_year: Mapped[str] = mapped_column(String(7), nullable=False, index=True)  # YYYY-MM
    # only 'paid' is written by the recording flows
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="paid")
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    tenant: Mapped["Profile"] = relationship("Profile")  # noqa: F821
    house: Mapped["House"] = relationship("House")  # noqa: F821
