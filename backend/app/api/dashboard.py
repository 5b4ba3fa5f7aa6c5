from datetime import date

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.reminders import is_rent_due, reminders_due
from app.core.rent_status import month_key
from app.db.database import get_db
from app.db.queries import active_tenants_query, get_active_tenant, paid_payments_query, resolve_active_assignment
from app.models.announcement import Announcement
from app.models.house import House
from app.models.maintenance import MaintenanceRequest
from app.models.payment import RentPayment
from app.utils.policy_loader import load_rent_policy

router = APIRouter()


@router.get("/admin")
def admin_stats(as_of: date | None = None, db: Session = Depends(get_db)):
    current_month = month_key(as_of or date.today())
    total_houses = db.query(House).count()
    occupied = db.query(House).filter(~House.is_vacant).count()
    revenue = (
        paid_payments_query(db, current_month)
        .with_entities(func.coalesce(func.sum(RentPayment.amount), 0))
        .scalar()
    )
    return {
        "month_year": current_month,
        "total_houses": total_houses,
        "occupied_houses": occupied,
        "vacant_houses": total_houses - occupied,
        "total_tenants": active_tenants_query(db).count(),
        "pending_requests": db.query(MaintenanceRequest)
        .filter(MaintenanceRequest.status == "pending")
        .count(),
        "monthly_revenue": int(revenue),
    }


@router.get("/tenant/{tenant_id}")
def tenant_stats(tenant_id: str, as_of: date | None = None, db: Session = Depends(get_db)):
    tenant = get_active_tenant(db, tenant_id)
    if not tenant:
        raise HTTPException(status_code=404, detail="Tenant not found.")
    today = as_of or date.today()
    policy = load_rent_policy(today.year)

    active = resolve_active_assignment(db, tenant_id)
    open_requests = (
        db.query(MaintenanceRequest)
        .filter(
            MaintenanceRequest.tenant_id == tenant_id,
            MaintenanceRequest.status.in_(["pending", "in_progress"]),
        )
        .count()
    )
    this_month_rent = (
        paid_payments_query(db, month_key(today))
        .filter(RentPayment.tenant_id == tenant_id)
        .with_entities(func.coalesce(func.sum(RentPayment.amount), 0))
        .scalar()
    )
    announcements = db.query(Announcement).filter(Announcement.is_active.is_(True)).count()
    paid = this_month_rent > 0

    return {
        "tenant_id": tenant_id,
        "full_name": tenant.full_name,
        "assignment": {
            "house_id": active.house.id,
            "room_name": active.house.room_name,
            "floor": active.house.floor,
            "section": active.house.section,
            "room_type": active.house.room_type,
            "amenities": active.house.amenities,
            "price": active.price,
            "assigned_at": active.assignment.assigned_at,
        }
        if active
        else None,
        "pending_requests": open_requests,
        "this_month_rent": int(this_month_rent),
        "announcements": announcements,
        "rent_due": active is not None and is_rent_due(today, paid, policy),
        "reminders": [
            {"tag": r.tag, "title": r.title, "body": r.body}
            for r in reminders_due(today, paid, tenant.notification_permission, policy)
        ]
        if active
        else [],
    }
