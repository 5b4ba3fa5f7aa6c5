"""
Rent status classifier.

Rent falls due on the 1st of each month. Status and penalty are never stored:
they are re-derived from the month, today's date and the recorded payment date
using the grace window of the rent policy.
"""
import calendar
from dataclasses import dataclass
from datetime import date

from app.utils.policy_loader import DEFAULT_POLICY, RentPolicy

PAID = "paid"
LATE = "late"
PENDING = "pending"
PENDING_LATE = "pending (late)"
OVERDUE = "overdue"


def parse_month_year(month_year: str) -> tuple[int, int]:
    """Split a "YYYY-MM" key into (year, month)."""
    parts = month_year.split("-")
    if len(parts) != 2 or len(parts[0]) != 4 or len(parts[1]) != 2:
        raise ValueError(f"Invalid month_year '{month_year}', expected YYYY-MM.")
    try:
        year, month = int(parts[0]), int(parts[1])
    except ValueError:
        raise ValueError(f"Invalid month_year '{month_year}', expected YYYY-MM.")
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month in '{month_year}'.")
    return year, month


def month_key(d: date) -> str:
    return f"{d.year:04d}-{d.month:02d}"


@dataclass
class StatusInfo:
    status: str
    penalty: int = 0
    rent: int = 0

    @property
    def is_settled(self) -> bool:
        return self.status in (PAID, LATE)

    @property
    def total_due(self) -> int:
        """Amount still owed for the month: the penalty alone once rent is paid."""
        if self.is_settled:
            return self.penalty
        return self.rent + self.penalty


@dataclass
class MonthStatus:
    month_year: str
    month_name: str
    info: StatusInfo
    payment: dict | None = None


def classify_month(
    month_year: str,
    today: date,
    price: int,
    payment_date: date | None = None,
    policy: RentPolicy = DEFAULT_POLICY,
) -> StatusInfo | None:
    """
    Derive the status of one billing month.

    Returns None for months after the current one: they are not billable yet.
    A payment made after the late window is reported as paid with no penalty,
    whereas an unpaid month past the late window is overdue. That asymmetry is
    kept as-is because changing it changes penalty outcomes.
    """
    period = parse_month_year(month_year)
    current = (today.year, today.month)
    if period > current:
        return None

    if payment_date is not None:
        day = payment_date.day
        if 1 <= day <= policy.grace_end_day:
            return StatusInfo(PAID, 0, price)
        if policy.grace_end_day < day <= policy.late_end_day:
            return StatusInfo(LATE, policy.penalty, price)
        return StatusInfo(PAID, 0, price)

    if period == current:
        if today.day <= policy.grace_end_day:
            return StatusInfo(PENDING, 0, price)
        if today.day <= policy.late_end_day:
            return StatusInfo(PENDING_LATE, policy.penalty, price)
        return StatusInfo(OVERDUE, policy.penalty, price)

    return StatusInfo(OVERDUE, policy.penalty, price)


def build_payment_history(
    assigned_at: date | None,
    today: date,
    price: int,
    payments: list[dict],
    year: int | None = None,
    policy: RentPolicy = DEFAULT_POLICY,
) -> list[MonthStatus]:
    """
    Classify every month from the assignment month through the current month.

    payments: [{"month_year": str, "payment_date": date, ...}]; when a month has
    several payments the first one in the list is used.
    Most recent month first. `year` restricts the window to one calendar year.
    """
    if assigned_at is None:
        return []

    start = (assigned_at.year, assigned_at.month)
    end = (today.year, today.month)
    if year is not None:
        start = max(start, (year, 1))
        end = min(end, (year, 12))

    by_month: dict[str, dict] = {}
    for p in payments:
        by_month.setdefault(p["month_year"], p)

    history: list[MonthStatus] = []
    y, m = start
    while (y, m) <= end:
        key = f"{y:04d}-{m:02d}"
        payment = by_month.get(key)
        info = classify_month(
            key, today, price, payment["payment_date"] if payment else None, policy
        )
        if info is not None:
            history.append(MonthStatus(key, calendar.month_name[m], info, payment))
        y, m = (y + 1, 1) if m == 12 else (y, m + 1)

    history.reverse()
    return history
