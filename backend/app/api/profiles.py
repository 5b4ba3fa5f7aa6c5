import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, field_validator
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.db.database import get_db
from app.db.queries import active_assignments_query, active_tenants_query
from app.models.assignment import TenantAssignment
from app.models.profile import NOTIFICATION_PERMISSIONS, ROLES, Profile

logger = logging.getLogger(__name__)

router = APIRouter()


class ProfileCreate(BaseModel):
    id: str | None = None  # auth principal id, generated when absent
    role: str = "tenant"
    full_name: str | None = None
    email: str | None = None
    phone: str | None = None

    @field_validator("role")
    @classmethod
    def valid_role(cls, v):
        if v not in ROLES:
            raise ValueError(f"Invalid role. Accepted values: {sorted(ROLES)}")
        return v


class ProfileUpdate(BaseModel):
    full_name: str | None = None
    email: str | None = None
    phone: str | None = None


class ProfileResponse(BaseModel):
    id: str
    role: str
    full_name: str | None
    email: str | None
    phone: str | None
    notification_permission: str
    created_at: datetime | None
    deleted_at: datetime | None

    model_config = {"from_attributes": True}


class AssignedHouse(BaseModel):
    id: int
    room_name: str
    floor: str
    section: str
    price: int

    model_config = {"from_attributes": True}


class AssignmentSummary(BaseModel):
    id: int
    house_id: int
    assigned_at: datetime
    house: AssignedHouse

    model_config = {"from_attributes": True}


class TenantResponse(ProfileResponse):
    assignment: AssignmentSummary | None = None


class PermissionUpdate(BaseModel):
    permission: str

    @field_validator("permission")
    @classmethod
    def valid_permission(cls, v):
        if v not in NOTIFICATION_PERMISSIONS:
            raise ValueError(f"Invalid permission. Accepted values: {sorted(NOTIFICATION_PERMISSIONS)}")
        return v


def _get_profile_or_404(profile_id: str, db: Session) -> Profile:
    profile = (
        db.query(Profile)
        .filter(Profile.id == profile_id, Profile.deleted_at.is_(None))
        .first()
    )
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found.")
    return profile


@router.post("/", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
def create_profile(data: ProfileCreate, db: Session = Depends(get_db)):
    if data.id and db.query(Profile).filter(Profile.id == data.id).first():
        raise HTTPException(status_code=409, detail="A profile with this id already exists.")
    profile = Profile(**data.model_dump(exclude_none=True))
    db.add(profile)
    db.commit()
    db.refresh(profile)
    logger.info("Registered %s profile %s", profile.role, profile.id)
    return profile


@router.get("/tenants", response_model=list[TenantResponse])
def list_tenants(search: str | None = None, db: Session = Depends(get_db)):
    q = active_tenants_query(db)
    if search:
        pattern = f"%{search}%"
        q = q.filter(
            or_(
                Profile.full_name.ilike(pattern),
                Profile.email.ilike(pattern),
                Profile.phone.ilike(pattern),
            )
        )
    tenants = q.order_by(Profile.full_name).all()

    # later rows overwrite earlier ones: the most recent active assignment wins
    current: dict[str, TenantAssignment] = {}
    for a in active_assignments_query(db).order_by(
        TenantAssignment.assigned_at, TenantAssignment.id
    ):
        current[a.tenant_id] = a

    result = []
    for t in tenants:
        item = TenantResponse.model_validate(t)
        if t.id in current:
            item.assignment = AssignmentSummary.model_validate(current[t.id])
        result.append(item)
    return result


@router.get("/{profile_id}", response_model=ProfileResponse)
def get_profile(profile_id: str, db: Session = Depends(get_db)):
    return _get_profile_or_404(profile_id, db)


@router.put("/{profile_id}", response_model=ProfileResponse)
def update_profile(profile_id: str, data: ProfileUpdate, db: Session = Depends(get_db)):
    profile = _get_profile_or_404(profile_id, db)
    for field, value in data.model_dump(exclude_none=True).items():
        setattr(profile, field, value)
    db.commit()
    db.refresh(profile)
    return profile


@router.put("/{profile_id}/notification-permission", response_model=ProfileResponse)
def set_notification_permission(
    profile_id: str, data: PermissionUpdate, db: Session = Depends(get_db)
):
    profile = _get_profile_or_404(profile_id, db)
    profile.notification_permission = data.permission
    db.commit()
    db.refresh(profile)
    return profile


@router.delete("/{profile_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_profile(profile_id: str, db: Session = Depends(get_db)):
    """Soft delete. The tenant's active assignments end in the same commit."""
    profile = _get_profile_or_404(profile_id, db)
    profile.deleted_at = datetime.now()
    (
        db.query(TenantAssignment)
        .filter(TenantAssignment.tenant_id == profile_id, TenantAssignment.is_active.is_(True))
        .update({TenantAssignment.is_active: False}, synchronize_session=False)
    )
    db.commit()
    logger.info("Soft-deleted profile %s", profile_id)
