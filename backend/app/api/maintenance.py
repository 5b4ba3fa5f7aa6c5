import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session, joinedload

from app.db.database import get_db
from app.db.queries import get_active_tenant, resolve_active_assignment
from app.models.maintenance import PRIORITIES, REQUEST_STATUSES, REQUEST_TYPES, MaintenanceRequest

logger = logging.getLogger(__name__)

router = APIRouter()


class RequestCreate(BaseModel):
    tenant_id: str
    request_type: str
    title: str
    description: str | None = None
    priority: str = "medium"

    @field_validator("request_type")
    @classmethod
    def valid_type(cls, v):
        if v not in REQUEST_TYPES:
            raise ValueError(f"Invalid request type. Accepted values: {sorted(REQUEST_TYPES)}")
        return v

    @field_validator("priority")
    @classmethod
    def valid_priority(cls, v):
        if v not in PRIORITIES:
            raise ValueError(f"Invalid priority. Accepted values: {sorted(PRIORITIES)}")
        return v

    @field_validator("title")
    @classmethod
    def title_required(cls, v):
        if not v.strip():
            raise ValueError("A title is required.")
        return v.strip()


class StatusUpdate(BaseModel):
    status: str

    @field_validator("status")
    @classmethod
    def valid_status(cls, v):
        if v not in REQUEST_STATUSES:
            raise ValueError(f"Invalid status. Accepted values: {sorted(REQUEST_STATUSES)}")
        return v


class RequestResponse(BaseModel):
    id: int
    tenant_id: str
    house_id: int
    request_type: str
    title: str
    description: str | None
    priority: str
    status: str
    created_at: datetime | None
    updated_at: datetime | None

    model_config = {"from_attributes": True}


class RequestDetail(RequestResponse):
    tenant_name: str | None = None
    tenant_phone: str | None = None
    room_name: str | None = None
    floor: str | None = None
    section: str | None = None


def _get_request_or_404(request_id: int, db: Session) -> MaintenanceRequest:
    req = db.query(MaintenanceRequest).filter(MaintenanceRequest.id == request_id).first()
    if not req:
        raise HTTPException(status_code=404, detail="Maintenance request not found.")
    return req


@router.post("/", response_model=RequestResponse, status_code=status.HTTP_201_CREATED)
def create_request(data: RequestCreate, db: Session = Depends(get_db)):
    if not get_active_tenant(db, data.tenant_id):
        raise HTTPException(status_code=404, detail="Tenant not found.")
    active = resolve_active_assignment(db, data.tenant_id)
    if active is None:
        raise HTTPException(
            status_code=400, detail="You need to be assigned a house to submit maintenance requests."
        )
    req = MaintenanceRequest(**data.model_dump(), house_id=active.house.id, status="pending")
    db.add(req)
    db.commit()
    db.refresh(req)
    logger.info("Maintenance request %s opened by tenant %s", req.id, req.tenant_id)
    return req


@router.get("/", response_model=list[RequestDetail])
def list_requests(status: str | None = None, db: Session = Depends(get_db)):
    q = db.query(MaintenanceRequest).options(
        joinedload(MaintenanceRequest.tenant), joinedload(MaintenanceRequest.house)
    )
    if status:
        q = q.filter(MaintenanceRequest.status == status)
    result = []
    for r in q.order_by(MaintenanceRequest.created_at.desc(), MaintenanceRequest.id.desc()):
        item = RequestDetail.model_validate(r)
        if r.tenant:
            item.tenant_name, item.tenant_phone = r.tenant.full_name, r.tenant.phone
        if r.house:
            item.room_name, item.floor, item.section = r.house.room_name, r.house.floor, r.house.section
        result.append(item)
    return result


@router.get("/tenant/{tenant_id}", response_model=list[RequestResponse])
def list_tenant_requests(tenant_id: str, db: Session = Depends(get_db)):
    return (
        db.query(MaintenanceRequest)
        .filter(MaintenanceRequest.tenant_id == tenant_id)
        .order_by(MaintenanceRequest.created_at.desc(), MaintenanceRequest.id.desc())
        .all()
    )


@router.put("/{request_id}/status", response_model=RequestResponse)
def update_status(request_id: int, data: StatusUpdate, db: Session = Depends(get_db)):
    req = _get_request_or_404(request_id, db)
    req.status = data.status
    db.commit()
    db.refresh(req)
    logger.info("Maintenance request %s is now %s", request_id, data.status)
    return req


@router.post("/{request_id}/cancel", response_model=RequestResponse)
def cancel_request(request_id: int, db: Session = Depends(get_db)):
    req = _get_request_or_404(request_id, db)
    if req.status != "pending":
        raise HTTPException(status_code=409, detail="Only pending requests can be cancelled.")
    req.status = "cancelled"
    db.commit()
    db.refresh(req)
    return req
