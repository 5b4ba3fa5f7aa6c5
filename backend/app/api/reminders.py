from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.core.reminders import GRANTED, reminders_due, upcoming_reminders
from app.core.rent_status import month_key
from app.db.database import get_db
from app.db.queries import get_active_tenant, paid_payments_query, resolve_active_assignment
from app.models.payment import RentPayment
from app.utils.policy_loader import load_rent_policy

router = APIRouter()


def _as_dict(r) -> dict:
    return {"tag": r.tag, "title": r.title, "body": r.body, "send_at": r.send_at}


@router.get("/{tenant_id}")
def tenant_reminders(tenant_id: str, now: datetime | None = None, db: Session = Depends(get_db)):
    """Rent reminders for the current month. Empty unless notifications were granted."""
    tenant = get_active_tenant(db, tenant_id)
    if not tenant:
        raise HTTPException(status_code=404, detail="Tenant not found.")
    now = now or datetime.now()
    if now.tzinfo is not None:
        # schedules are in naive local time
        now = now.astimezone().replace(tzinfo=None)
    policy = load_rent_policy(now.year)

    result = {
        "tenant_id": tenant_id,
        "permission": tenant.notification_permission,
        "upcoming": [],
        "due_today": [],
    }
    if tenant.notification_permission != GRANTED or not resolve_active_assignment(db, tenant_id):
        return result

    already_paid = (
        paid_payments_query(db, month_key(now))
        .filter(RentPayment.tenant_id == tenant_id)
        .first()
        is not None
    )
    if not already_paid:
        result["upcoming"] = [_as_dict(r) for r in upcoming_reminders(now, policy)]
    result["due_today"] = [
        _as_dict(r)
        for r in reminders_due(now.date(), already_paid, tenant.notification_permission, policy)
    ]
    return result
