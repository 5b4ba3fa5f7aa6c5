"""
Rent reminder planning for the tenant portal.

Reminders go out on the policy's reminder days (the 1st and the 5th by default),
and only to tenants who granted notification permission.
"""
from dataclasses import dataclass
from datetime import date, datetime

from app.utils.policy_loader import DEFAULT_POLICY, RentPolicy

GRANTED = "granted"
DENIED = "denied"
UNDETERMINED = "undetermined"


@dataclass
class Reminder:
    tag: str
    title: str
    body: str
    send_at: datetime


def _reminder_for_day(d: date, policy: RentPolicy) -> Reminder:
    send_at = datetime(d.year, d.month, d.day, policy.reminder_hour)
    if d.day >= policy.grace_end_day:
        return Reminder(
            tag="rent-final",
            title="Final Rent Reminder",
            body="Last day to pay rent without late fees! Pay now to avoid penalties.",
            send_at=send_at,
        )
    return Reminder(
        tag="rent-reminder",
        title="Rent Reminder",
        body=(
            "Your monthly rent is now due! "
            f"Pay before the {_ordinal(policy.grace_end_day)} to avoid late fees."
        ),
        send_at=send_at,
    )


def _ordinal(n: int) -> str:
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def monthly_schedule(year: int, month: int, policy: RentPolicy = DEFAULT_POLICY) -> list[Reminder]:
    return [_reminder_for_day(date(year, month, day), policy) for day in sorted(policy.reminder_days)]


def upcoming_reminders(now: datetime, policy: RentPolicy = DEFAULT_POLICY) -> list[Reminder]:
    """Reminders of the current month that are still ahead of `now`."""
    return [r for r in monthly_schedule(now.year, now.month, policy) if r.send_at > now]


def reminders_due(
    today: date,
    already_paid: bool,
    permission: str,
    policy: RentPolicy = DEFAULT_POLICY,
) -> list[Reminder]:
    """Reminders to deliver today. Nothing is sent without a granted permission."""
    if permission != GRANTED or already_paid:
        return []
    if today.day not in policy.reminder_days:
        return []
    return [_reminder_for_day(today, policy)]


def is_rent_due(today: date, already_paid: bool, policy: RentPolicy = DEFAULT_POLICY) -> bool:
    return not already_paid and 1 <= today.day <= policy.grace_end_day
