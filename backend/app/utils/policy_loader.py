import logging
import os
from dataclasses import dataclass
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RentPolicy:
    """Grace window, penalty and reminder calendar applied to one billing year."""

    grace_end_day: int = 5  # last day paid without penalty
    late_end_day: int = 9  # last day still labelled late rather than overdue
    penalty: int = 200
    reminder_days: tuple[int, ...] = (1, 5)
    reminder_hour: int = 9
    currency: str = "KSh"


DEFAULT_POLICY = RentPolicy()


def _policy_path() -> Path:
    """Read RENT_POLICY_PATH at call time (supports env var changes in tests)."""
    return Path(os.getenv("RENT_POLICY_PATH", "/app/rent_policy"))


# Use a simple dict cache keyed by (year, path) to support test env var overrides
_cache: dict[tuple, RentPolicy] = {}


def _from_yaml(target: Path) -> RentPolicy:
    with open(target) as f:
        data = yaml.safe_load(f) or {}
    rent = data.get("rent", {})
    reminders = data.get("reminders", {})
    return RentPolicy(
        grace_end_day=int(rent.get("grace_end_day", DEFAULT_POLICY.grace_end_day)),
        late_end_day=int(rent.get("late_end_day", DEFAULT_POLICY.late_end_day)),
        penalty=int(rent.get("penalty", DEFAULT_POLICY.penalty)),
        reminder_days=tuple(reminders.get("days", DEFAULT_POLICY.reminder_days)),
        reminder_hour=int(reminders.get("hour", DEFAULT_POLICY.reminder_hour)),
        currency=str(data.get("currency", DEFAULT_POLICY.currency)),
    )


def load_rent_policy(year: int) -> RentPolicy:
    """Load the rent policy for the given year, falling back to the latest available."""
    path = _policy_path()
    cache_key = (year, str(path))
    if cache_key in _cache:
        return _cache[cache_key]

    target = path / f"{year}.yaml"
    if not target.exists():
        available = sorted(
            [int(p.stem) for p in path.glob("*.yaml") if p.stem.isdigit()], reverse=True
        )
        target = next((path / f"{y}.yaml" for y in available if y <= year), None)

    if target is None:
        logger.warning("No rent policy found for %s in %s, using defaults", year, path)
        result = DEFAULT_POLICY
    else:
        result = _from_yaml(target)
    _cache[cache_key] = result
    return result


def clear_policy_cache() -> None:
    _cache.clear()
