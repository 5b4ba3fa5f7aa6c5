"""
Rent API: payment recording, monthly collection tracking, per-tenant payment
history with derived status, and PDF exports of both.
"""
import logging
from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import Response
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session, joinedload

from app.core.collection import MonthlyCollection, compute_monthly_collection
from app.core.rent_status import build_payment_history, month_key, parse_month_year
from app.db.database import get_db
from app.db.queries import (
    collection_inputs,
    get_active_tenant,
    paid_payments_query,
    resolve_active_assignment,
)
from app.models.house import House
from app.models.payment import RentPayment
from app.utils.pdf_generator import generate_collection_report_pdf, generate_tenant_statement_pdf
from app.utils.policy_loader import load_rent_policy

logger = logging.getLogger(__name__)

router = APIRouter()


class PaymentCreate(BaseModel):
    tenant_id: str
    house_id: int
    amount: int
    month_year: str
    payment_method: str | None = None
    payment_reference: str | None = None
    payment_date: date | None = None

    @field_validator("amount")
    @classmethod
    def positive_amount(cls, v):
        if v <= 0:
            raise ValueError("Amount must be positive.")
        return v

    @field_validator("month_year")
    @classmethod
    def valid_month_year(cls, v):
        parse_month_year(v)
        return v

    @field_validator("payment_method", "payment_reference")
    @classmethod
    def blank_to_none(cls, v):
        return v or None


class PaymentResponse(BaseModel):
    id: int
    tenant_id: str
    house_id: int
    amount: int
    payment_method: str | None
    payment_reference: str | None
    payment_date: date
    month_year: str
    status: str

    model_config = {"from_attributes": True}


class PaymentDetail(PaymentResponse):
    tenant_name: str | None = None
    tenant_email: str | None = None
    room_name: str | None = None
    floor: str | None = None
    section: str | None = None
    price: int | None = None


def _month_or_422(month_year: str) -> str:
    try:
        parse_month_year(month_year)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return month_year


def _collection_dict(result: MonthlyCollection) -> dict:
    return {
        "month_year": result.month_year,
        "expected_total": result.expected_total,
        "paid_total": result.paid_total,
        "remaining": result.remaining,
        "display_remaining": result.display_remaining,
        "assigned_tenants": result.assigned_tenants,
        "paid_tenants": result.paid_tenants,
        "collection_rate": result.collection_rate,
        "status": result.status_label,
        "unpaid_tenants": [
            {
                "tenant_id": u.tenant_id,
                "tenant_name": u.tenant_name,
                "tenant_email": u.tenant_email,
                "house_id": u.house_id,
                "room_name": u.room_name,
                "expected_amount": u.expected_amount,
                "paid_amount": u.paid_amount,
                "outstanding": u.outstanding,
            }
            for u in result.unpaid_tenants
        ],
    }


def _tenant_history(tenant_id: str, year: int | None, as_of: date, db: Session) -> dict:
    tenant = get_active_tenant(db, tenant_id)
    if not tenant:
        raise HTTPException(status_code=404, detail="Tenant not found.")
    policy = load_rent_policy(as_of.year)
    active = resolve_active_assignment(db, tenant_id)
    if active is None:
        return {
            "tenant_id": tenant_id,
            "tenant_name": tenant.full_name,
            "currency": policy.currency,
            "house": None,
            "months": [],
        }

    payments = [
        {
            "id": p.id,
            "amount": p.amount,
            "month_year": p.month_year,
            "payment_date": p.payment_date,
            "payment_method": p.payment_method,
            "payment_reference": p.payment_reference,
        }
        for p in paid_payments_query(db)
        .filter(RentPayment.tenant_id == tenant_id)
        .order_by(RentPayment.payment_date, RentPayment.id)
        .all()
    ]
    history = build_payment_history(
        assigned_at=active.assignment.assigned_at,
        today=as_of,
        price=active.price,
        payments=payments,
        year=year,
        policy=policy,
    )
    return {
        "tenant_id": tenant_id,
        "tenant_name": tenant.full_name,
        "currency": policy.currency,
        "house": {
            "id": active.house.id,
            "room_name": active.house.room_name,
            "price": active.price,
        },
        "months": [
            {
                "month_year": m.month_year,
                "month_name": m.month_name,
                "status": m.info.status,
                "penalty": m.info.penalty,
                "rent": m.info.rent,
                "total_due": m.info.total_due,
                "payment": m.payment,
            }
            for m in history
        ],
    }


@router.get("/payments", response_model=list[PaymentDetail])
def list_payments(month_year: str | None = None, db: Session = Depends(get_db)):
    month_year = _month_or_422(month_year or month_key(date.today()))
    payments = (
        db.query(RentPayment)
        .options(joinedload(RentPayment.tenant), joinedload(RentPayment.house))
        .filter(RentPayment.month_year == month_year)
        .order_by(RentPayment.payment_date.desc(), RentPayment.id.desc())
        .all()
    )
    result = []
    for p in payments:
        item = PaymentDetail.model_validate(p)
        if p.tenant:
            item.tenant_name, item.tenant_email = p.tenant.full_name, p.tenant.email
        if p.house:
            item.room_name, item.floor = p.house.room_name, p.house.floor
            item.section, item.price = p.house.section, p.house.price
        result.append(item)
    return result


@router.get("/payments/tenant/{tenant_id}", response_model=list[PaymentResponse])
def list_tenant_payments(tenant_id: str, year: int | None = None, db: Session = Depends(get_db)):
    q = db.query(RentPayment).filter(RentPayment.tenant_id == tenant_id)
    if year:
        q = q.filter(RentPayment.month_year.like(f"{year:04d}-%"))
    return q.order_by(RentPayment.month_year.desc(), RentPayment.payment_date.desc()).all()


@router.post("/payments", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
def record_payment(data: PaymentCreate, db: Session = Depends(get_db)):
    if not get_active_tenant(db, data.tenant_id):
        raise HTTPException(status_code=404, detail="Tenant not found.")
    if not db.query(House).filter(House.id == data.house_id).first():
        raise HTTPException(status_code=404, detail="House not found.")
    payment = RentPayment(**data.model_dump(exclude_none=True), status="paid")
    db.add(payment)
    db.commit()
    db.refresh(payment)
    logger.info(
        "Recorded payment of %s for tenant %s (%s)", payment.amount, payment.tenant_id, payment.month_year
    )
    return payment


@router.get("/collection/{month_year}")
def monthly_collection(month_year: str, db: Session = Depends(get_db)):
    _month_or_422(month_year)
    assignments, payments = collection_inputs(db, month_year)
    return _collection_dict(compute_monthly_collection(month_year, assignments, payments))


@router.post(
    "/collection/{month_year}/settle/{tenant_id}",
    response_model=PaymentResponse,
    status_code=status.HTTP_201_CREATED,
)
def settle_outstanding(month_year: str, tenant_id: str, db: Session = Depends(get_db)):
    """Record the tenant's full outstanding balance for the month as a manual payment."""
    _month_or_422(month_year)
    assignments, payments = collection_inputs(db, month_year)
    result = compute_monthly_collection(month_year, assignments, payments)
    unpaid = next((u for u in result.unpaid_tenants if u.tenant_id == tenant_id), None)
    if unpaid is None:
        raise HTTPException(status_code=409, detail="Nothing outstanding for this tenant.")

    payment = RentPayment(
        tenant_id=tenant_id,
        house_id=unpaid.house_id,
        amount=unpaid.outstanding,
        month_year=month_year,
        status="paid",
        payment_method="manual",
        payment_reference=f"Manual entry for {unpaid.tenant_name}",
    )
    db.add(payment)
    db.commit()
    db.refresh(payment)
    logger.info("Settled %s outstanding for tenant %s (%s)", payment.amount, tenant_id, month_year)
    return payment


@router.get("/history/{tenant_id}")
def payment_history(
    tenant_id: str,
    year: int | None = None,
    as_of: date | None = None,
    db: Session = Depends(get_db),
):
    return _tenant_history(tenant_id, year, as_of or date.today(), db)


@router.get("/collection/{month_year}/pdf")
def export_collection_pdf(month_year: str, db: Session = Depends(get_db)):
    data = monthly_collection(month_year, db)
    year, _ = parse_month_year(month_year)
    data["currency"] = load_rent_policy(year).currency
    pdf_bytes = generate_collection_report_pdf(data)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="collection_{month_year}.pdf"'},
    )


@router.get("/history/{tenant_id}/pdf")
def export_statement_pdf(
    tenant_id: str,
    year: int | None = None,
    as_of: date | None = None,
    db: Session = Depends(get_db),
):
    as_of = as_of or date.today()
    data = _tenant_history(tenant_id, year, as_of, db)
    pdf_bytes = generate_tenant_statement_pdf(data, generated_on=datetime.now())
    suffix = year or as_of.year
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="statement_{tenant_id}_{suffix}.pdf"'},
    )
