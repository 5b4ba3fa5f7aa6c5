import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session, joinedload

from app.db.database import get_db
from app.models.announcement import AUDIENCES, Announcement
from app.models.profile import Profile

logger = logging.getLogger(__name__)

router = APIRouter()


class AnnouncementCreate(BaseModel):
    admin_id: str
    title: str
    content: str
    target_audience: str = "all"
    target_filter: dict = {}

    @field_validator("title", "content")
    @classmethod
    def not_blank(cls, v):
        if not v.strip():
            raise ValueError("Title and content are required.")
        return v

    @field_validator("target_audience")
    @classmethod
    def valid_audience(cls, v):
        if v not in AUDIENCES:
            raise ValueError(f"Invalid audience. Accepted values: {sorted(AUDIENCES)}")
        return v


class AnnouncementResponse(BaseModel):
    id: int
    admin_id: str
    title: str
    content: str
    target_audience: str
    target_filter: dict
    is_active: bool
    created_at: datetime | None
    author_name: str | None = None

    model_config = {"from_attributes": True}


def _with_author(a: Announcement) -> AnnouncementResponse:
    item = AnnouncementResponse.model_validate(a)
    item.author_name = a.admin.full_name if a.admin else None
    return item


def _ordered(db: Session):
    return (
        db.query(Announcement)
        .options(joinedload(Announcement.admin))
        .order_by(Announcement.created_at.desc(), Announcement.id.desc())
    )


@router.post("/", response_model=AnnouncementResponse, status_code=status.HTTP_201_CREATED)
def create_announcement(data: AnnouncementCreate, db: Session = Depends(get_db)):
    admin = (
        db.query(Profile)
        .filter(Profile.id == data.admin_id, Profile.role == "admin", Profile.deleted_at.is_(None))
        .first()
    )
    if not admin:
        raise HTTPException(status_code=403, detail="Only admins can post announcements.")
    announcement = Announcement(**data.model_dump(), is_active=True)
    db.add(announcement)
    db.commit()
    db.refresh(announcement)
    logger.info("Announcement %s posted by %s", announcement.id, admin.id)
    return _with_author(announcement)


@router.get("/", response_model=list[AnnouncementResponse])
def list_announcements(db: Session = Depends(get_db)):
    return [_with_author(a) for a in _ordered(db)]


@router.get("/active", response_model=list[AnnouncementResponse])
def list_active_announcements(db: Session = Depends(get_db)):
    return [_with_author(a) for a in _ordered(db).filter(Announcement.is_active.is_(True))]


@router.post("/{announcement_id}/toggle", response_model=AnnouncementResponse)
def toggle_announcement(announcement_id: int, db: Session = Depends(get_db)):
    announcement = db.query(Announcement).filter(Announcement.id == announcement_id).first()
    if not announcement:
        raise HTTPException(status_code=404, detail="Announcement not found.")
    announcement.is_active = not announcement.is_active
    db.commit()
    db.refresh(announcement)
    return _with_author(announcement)
