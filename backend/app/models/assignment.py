from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.database import Base


class TenantAssignment(Base):
    """One row per tenancy. Rows are deactivated on unassign, never deleted."""

    __tablename__ = "tenant_assignments"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    tenant_id: Mapped[str] = mapped_column(ForeignKey("profiles.id"), nullable=False, index=True)
    house_id: Mapped[int] = mapped_column(ForeignKey("houses.id"), nullable=False, index=True)
    # start of billing liability
    assigned_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.now)
    assigned_by: Mapped[str | None] = mapped_column(String(36), ForeignKey("profiles.id"))
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)

    tenant: Mapped["Profile"] = relationship("Profile", foreign_keys=[tenant_id])  # noqa: F821
    house: Mapped["House"] = relationship("House", back_populates="assignments")  # noqa: F821
