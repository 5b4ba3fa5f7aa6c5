"""
Shared query builders. Every tenant listing goes through `active_tenants_query`
so soft-deleted profiles never reappear.
"""
from dataclasses import dataclass

from sqlalchemy.orm import Query, Session, joinedload

from app.models.assignment import TenantAssignment
from app.models.house import House
from app.models.payment import RentPayment
from app.models.profile import Profile


@dataclass
class ActiveAssignment:
    assignment: TenantAssignment
    house: House

    @property
    def price(self) -> int:
        return self.house.price


def active_tenants_query(db: Session) -> Query:
    return db.query(Profile).filter(Profile.role == "tenant", Profile.deleted_at.is_(None))


def get_active_tenant(db: Session, tenant_id: str) -> Profile | None:
    return active_tenants_query(db).filter(Profile.id == tenant_id).first()


def active_assignments_query(db: Session) -> Query:
    return (
        db.query(TenantAssignment)
        .options(joinedload(TenantAssignment.house), joinedload(TenantAssignment.tenant))
        .filter(TenantAssignment.is_active.is_(True))
    )


def resolve_active_assignment(db: Session, tenant_id: str) -> ActiveAssignment | None:
    """
    The assignment currently in force for a tenant, or None.
    If several are active, the most recently assigned wins.
    """
    assignment = (
        active_assignments_query(db)
        .filter(TenantAssignment.tenant_id == tenant_id)
        .order_by(TenantAssignment.assigned_at.desc(), TenantAssignment.id.desc())
        .first()
    )
    if assignment is None:
        return None
    return ActiveAssignment(assignment=assignment, house=assignment.house)


def paid_payments_query(db: Session, month_year: str | None = None) -> Query:
    q = db.query(RentPayment).filter(RentPayment.status == "paid")
    if month_year:
        q = q.filter(RentPayment.month_year == month_year)
    return q


def collection_inputs(db: Session, month_year: str) -> tuple[list[dict], list[dict]]:
    """Load the assignment and payment rows the collection aggregator works on."""
    assignments = [
        {
            "tenant_id": a.tenant_id,
            "house_id": a.house_id,
            "price": a.house.price if a.house else 0,
            "tenant_name": a.tenant.full_name if a.tenant else None,
            "tenant_email": a.tenant.email if a.tenant else None,
            "room_name": a.house.room_name if a.house else None,
        }
        for a in active_assignments_query(db).order_by(TenantAssignment.id).all()
    ]
    payments = [
        {
            "tenant_id": p.tenant_id,
            "amount": p.amount,
            "month_year": p.month_year,
            "status": p.status,
        }
        for p in paid_payments_query(db, month_year).all()
    ]
    return assignments, payments
