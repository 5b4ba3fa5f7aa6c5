from sqlalchemy import JSON, Integer, String
from sqlalchemy.ext.hybrid import hybrid_property
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.database import Base


class House(Base):
    __tablename__ = "houses"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    floor: Mapped[str] = mapped_column(String(50), nullable=False)
    section: Mapped[str] = mapped_column(String(50), nullable=False)
    room_name: Mapped[str] = mapped_column(String(100), nullable=False)
    room_type: Mapped[str] = mapped_column(String(50), nullable=False)
    price: Mapped[int] = mapped_column(Integer, nullable=False)  # monthly rent
    amenities: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    assignments: Mapped[list["TenantAssignment"]] = relationship(  # noqa: F821
        "TenantAssignment", back_populates="house"
    )

    # Occupancy is derived from the active assignment, never stored.
    @hybrid_property
    def is_vacant(self) -> bool:
        return not any(a.is_active for a in self.assignments)

    @is_vacant.inplace.expression
    @classmethod
    def _is_vacant_expression(cls):
        return ~cls.assignments.any(is_active=True)
