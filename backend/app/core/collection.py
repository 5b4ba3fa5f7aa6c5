"""
Monthly collection accounting: expected rent vs. collected rent for one month,
and the list of tenants who still owe something.

Always a full recomputation from the two source sets; nothing is written.
"""
from dataclasses import dataclass, field

NEARLY_COMPLETE_RATIO = 0.8


@dataclass
class UnpaidTenant:
    tenant_id: str
    house_id: int
    expected_amount: int
    paid_amount: int
    tenant_name: str = "Unknown"
    tenant_email: str = ""
    room_name: str = "Unknown"

    @property
    def outstanding(self) -> int:
        return self.expected_amount - self.paid_amount


@dataclass
class MonthlyCollection:
    month_year: str
    expected_total: int = 0
    paid_total: int = 0
    assigned_tenants: int = 0
    paid_tenants: int = 0
    unpaid_tenants: list[UnpaidTenant] = field(default_factory=list)

    @property
    def remaining(self) -> int:
        # signed: negative on overpayment
        return self.expected_total - self.paid_total

    @property
    def display_remaining(self) -> int:
        return max(self.remaining, 0)

    @property
    def collection_rate(self) -> float:
        if self.expected_total <= 0:
            return 0.0
        return round(self.paid_total / self.expected_total * 100, 1)

    @property
    def status_label(self) -> str:
        if self.remaining <= 0:
            return "Complete"
        if self.paid_tenants >= self.assigned_tenants * NEARLY_COMPLETE_RATIO:
            return "Nearly Complete"
        return "Pending"


def compute_monthly_collection(
    month_year: str,
    assignments: list[dict],
    payments: list[dict],
) -> MonthlyCollection:
    """
    assignments: active assignments only,
        [{"tenant_id", "house_id", "price", "tenant_name"?, "tenant_email"?, "room_name"?}]
    payments: [{"tenant_id", "amount", "month_year", "status"}]; rows for other
        months or with a status other than "paid" are ignored.
    """
    paid = [
        p for p in payments
        if p["month_year"] == month_year and p.get("status", "paid") == "paid"
    ]

    paid_by_tenant: dict[str, int] = {}
    for p in paid:
        paid_by_tenant[p["tenant_id"]] = paid_by_tenant.get(p["tenant_id"], 0) + p["amount"]

    result = MonthlyCollection(
        month_year=month_year,
        expected_total=sum(a["price"] or 0 for a in assignments),
        paid_total=sum(p["amount"] for p in paid),
        assigned_tenants=len(assignments),
        paid_tenants=len(paid_by_tenant),
    )

    for a in assignments:
        expected = a["price"] or 0
        paid_amount = paid_by_tenant.get(a["tenant_id"], 0)
        if paid_amount < expected:
            result.unpaid_tenants.append(
                UnpaidTenant(
                    tenant_id=a["tenant_id"],
                    house_id=a["house_id"],
                    expected_amount=expected,
                    paid_amount=paid_amount,
                    tenant_name=a.get("tenant_name") or "Unknown",
                    tenant_email=a.get("tenant_email") or "",
                    room_name=a.get("room_name") or "Unknown",
                )
            )

    return result
