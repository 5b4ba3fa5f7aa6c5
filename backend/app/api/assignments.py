"""
House assignment. Assign, reassign and unassign each run as a single commit,
and vacancy is derived from the active assignment, so a house and its tenancy
can't disagree.
"""
import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from app.db.database import get_db
from app.db.queries import get_active_tenant, resolve_active_assignment
from app.models.assignment import TenantAssignment
from app.models.house import House
from app.models.profile import Profile

logger = logging.getLogger(__name__)

router = APIRouter()


class AssignmentCreate(BaseModel):
    tenant_id: str
    house_id: int
    assigned_by: str | None = None
    assigned_at: datetime | None = None

    @field_validator("assigned_at")
    @classmethod
    def local_naive(cls, v):
        if v is not None and v.tzinfo is not None:
            return v.astimezone().replace(tzinfo=None)
        return v


class AssignmentResponse(BaseModel):
    id: int
    tenant_id: str
    house_id: int
    assigned_at: datetime
    assigned_by: str | None
    is_active: bool

    model_config = {"from_attributes": True}


class ActiveAssignmentResponse(BaseModel):
    assignment: AssignmentResponse
    house_id: int
    room_name: str
    floor: str
    section: str
    room_type: str
    price: int


def _deactivate(db: Session, tenant_id: str) -> int:
    return (
        db.query(TenantAssignment)
        .filter(TenantAssignment.tenant_id == tenant_id, TenantAssignment.is_active.is_(True))
        .update({TenantAssignment.is_active: False}, synchronize_session=False)
    )


@router.post("/", response_model=AssignmentResponse, status_code=status.HTTP_201_CREATED)
def assign_house(data: AssignmentCreate, db: Session = Depends(get_db)):
    if not get_active_tenant(db, data.tenant_id):
        raise HTTPException(status_code=404, detail="Tenant not found.")
    house = db.query(House).filter(House.id == data.house_id).first()
    if not house:
        raise HTTPException(status_code=404, detail="House not found.")
    if not house.is_vacant:
        raise HTTPException(status_code=409, detail="House is already occupied.")
    if data.assigned_by:
        admin = (
            db.query(Profile)
            .filter(Profile.id == data.assigned_by, Profile.role == "admin")
            .first()
        )
        if not admin:
            raise HTTPException(status_code=403, detail="Only an admin can assign houses.")

    # reassignment ends the previous tenancy in the same transaction
    ended = _deactivate(db, data.tenant_id)
    assignment = TenantAssignment(**data.model_dump(exclude_none=True), is_active=True)
    db.add(assignment)
    db.commit()
    db.refresh(assignment)
    logger.info(
        "Assigned house %s to tenant %s (%d previous assignment(s) ended)",
        data.house_id, data.tenant_id, ended,
    )
    return assignment


@router.post("/unassign/{tenant_id}", status_code=status.HTTP_204_NO_CONTENT)
def unassign_house(tenant_id: str, db: Session = Depends(get_db)):
    if not resolve_active_assignment(db, tenant_id):
        raise HTTPException(status_code=404, detail="Tenant has no active assignment.")
    _deactivate(db, tenant_id)
    db.commit()
    logger.info("Unassigned tenant %s", tenant_id)


@router.get("/active/{tenant_id}", response_model=ActiveAssignmentResponse)
def get_active_assignment(tenant_id: str, db: Session = Depends(get_db)):
    active = resolve_active_assignment(db, tenant_id)
    if active is None:
        raise HTTPException(status_code=404, detail="No house assigned.")
    return ActiveAssignmentResponse(
        assignment=AssignmentResponse.model_validate(active.assignment),
        house_id=active.house.id,
        room_name=active.house.room_name,
        floor=active.house.floor,
        section=active.house.section,
        room_type=active.house.room_type,
        price=active.price,
    )
