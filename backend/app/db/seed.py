"""
Seed script: loads sample_dataset.json into the database.
Usage: python -m app.db.seed
"""
import json
from datetime import date, datetime
from pathlib import Path

from app.db.database import SessionLocal, init_db
from app.models.assignment import TenantAssignment
from app.models.house import House
from app.models.payment import RentPayment
from app.models.profile import Profile


def seed():
    init_db()
    db = SessionLocal()

    dataset_path = Path(__file__).parent.parent.parent / "tests" / "fixtures" / "sample_dataset.json"
    with open(dataset_path) as f:
        data = json.load(f)

    houses = {}
    for h in data["houses"]:
        house = House(**h)
        db.add(house)
        houses[house.room_name] = house
    db.flush()

    admin = Profile(role="admin", **data["admin"])
    db.add(admin)

    for t in data["tenants"]:
        db.add(Profile(
            id=t["id"],
            role="tenant",
            full_name=t["full_name"],
            email=t["email"],
            phone=t["phone"],
        ))
    db.flush()

    for t in data["tenants"]:
        if not t["room_name"]:
            continue
        db.add(TenantAssignment(
            tenant_id=t["id"],
            house_id=houses[t["room_name"]].id,
            assigned_at=datetime.fromisoformat(t["assigned_at"]),
            assigned_by=admin.id,
            is_active=True,
        ))

    house_of = {t["id"]: houses[t["room_name"]].id for t in data["tenants"] if t["room_name"]}
    for p in data["payments"]:
        db.add(RentPayment(
            tenant_id=p["tenant_id"],
            house_id=house_of[p["tenant_id"]],
            amount=p["amount"],
            month_year=p["month_year"],
            payment_date=date.fromisoformat(p["payment_date"]),
            payment_method=p["payment_method"],
            payment_reference=p["payment_reference"],
            status="paid",
        ))

    db.commit()
    db.close()
    print(
        f"Seeded {len(data['houses'])} houses, {len(data['tenants'])} tenants "
        f"and {len(data['payments'])} payments."
    )


if __name__ == "__main__":
    seed()
