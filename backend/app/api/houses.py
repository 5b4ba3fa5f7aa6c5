import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, field_validator
from sqlalchemy import or_
from sqlalchemy.orm import Query, Session

from app.db.database import get_db
from app.models.assignment import TenantAssignment
from app.models.house import House

logger = logging.getLogger(__name__)

router = APIRouter()

PRICE_BANDS = {"all", "under-5000", "5000-8000", "over-8000"}


class HouseCreate(BaseModel):
    floor: str
    section: str
    room_name: str
    room_type: str
    price: int
    amenities: list[str] = []

    @field_validator("floor", "section", "room_name", "room_type")
    @classmethod
    def not_blank(cls, v):
        if not v.strip():
            raise ValueError("This field is required.")
        return v.strip()

    @field_validator("price")
    @classmethod
    def positive_price(cls, v):
        if v <= 0:
            raise ValueError("Rent must be a positive amount.")
        return v


class HouseUpdate(BaseModel):
    floor: str | None = None
    section: str | None = None
    room_name: str | None = None
    room_type: str | None = None
    price: int | None = None
    amenities: list[str] | None = None

    @field_validator("price")
    @classmethod
    def positive_price(cls, v):
        if v is not None and v <= 0:
            raise ValueError("Rent must be a positive amount.")
        return v


class HouseResponse(BaseModel):
    id: int
    floor: str
    section: str
    room_name: str
    room_type: str
    price: int
    amenities: list[str]
    is_vacant: bool

    model_config = {"from_attributes": True}


def _filtered(
    q: Query,
    search: str | None,
    floor: str | None,
    price_band: str,
) -> Query:
    if price_band not in PRICE_BANDS:
        raise HTTPException(status_code=422, detail=f"Invalid price band. Accepted values: {sorted(PRICE_BANDS)}")
    if search:
        pattern = f"%{search}%"
        q = q.filter(
            or_(
                House.room_name.ilike(pattern),
                House.floor.ilike(pattern),
                House.section.ilike(pattern),
            )
        )
    if floor and floor != "all":
        q = q.filter(House.floor == floor)
    if price_band == "under-5000":
        q = q.filter(House.price < 5000)
    elif price_band == "5000-8000":
        q = q.filter(House.price >= 5000, House.price <= 8000)
    elif price_band == "over-8000":
        q = q.filter(House.price > 8000)
    return q.order_by(House.floor, House.section, House.room_name)


def _get_house_or_404(house_id: int, db: Session) -> House:
    house = db.query(House).filter(House.id == house_id).first()
    if not house:
        raise HTTPException(status_code=404, detail="House not found.")
    return house


@router.get("/", response_model=list[HouseResponse])
def list_houses(
    search: str | None = None,
    floor: str | None = None,
    price_band: str = "all",
    vacant: bool | None = None,
    db: Session = Depends(get_db),
):
    q = db.query(House)
    if vacant is not None:
        q = q.filter(House.is_vacant if vacant else ~House.is_vacant)
    return _filtered(q, search, floor, price_band).all()


@router.get("/search", response_model=list[HouseResponse])
def search_vacant_houses(
    search: str | None = None,
    floor: str | None = None,
    price_band: str = "all",
    db: Session = Depends(get_db),
):
    """Public room search: vacant rooms only."""
    return _filtered(db.query(House).filter(House.is_vacant), search, floor, price_band).all()


@router.get("/grouped")
def grouped_houses(search: str | None = None, db: Session = Depends(get_db)):
    houses = _filtered(db.query(House), search, None, "all").all()
    groups: dict[str, list[dict]] = {}
    for h in houses:
        groups.setdefault(f"{h.floor} - {h.section}", []).append(
            HouseResponse.model_validate(h).model_dump()
        )
    return {
        "groups": groups,
        "total": len(houses),
        "occupied": sum(1 for h in houses if not h.is_vacant),
    }


@router.post("/", response_model=HouseResponse, status_code=status.HTTP_201_CREATED)
def create_house(data: HouseCreate, db: Session = Depends(get_db)):
    house = House(**data.model_dump())
    db.add(house)
    db.commit()
    db.refresh(house)
    logger.info("Created house %s (%s)", house.id, house.room_name)
    return house


@router.get("/{house_id}", response_model=HouseResponse)
def get_house(house_id: int, db: Session = Depends(get_db)):
    return _get_house_or_404(house_id, db)


@router.put("/{house_id}", response_model=HouseResponse)
def update_house(house_id: int, data: HouseUpdate, db: Session = Depends(get_db)):
    house = _get_house_or_404(house_id, db)
    for field, value in data.model_dump(exclude_none=True).items():
        setattr(house, field, value)
    db.commit()
    db.refresh(house)
    return house


@router.delete("/{house_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_house(house_id: int, db: Session = Depends(get_db)):
    house = _get_house_or_404(house_id, db)
    if not house.is_vacant:
        raise HTTPException(status_code=409, detail="House is occupied; unassign the tenant first.")
    has_history = (
        db.query(TenantAssignment.id).filter(TenantAssignment.house_id == house_id).first()
    )
    if has_history:
        raise HTTPException(status_code=409, detail="House has tenancy history and cannot be deleted.")
    db.delete(house)
    db.commit()
    logger.info("Deleted house %s", house_id)
