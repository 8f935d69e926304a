from dataclasses import dataclass, field, replace
from typing import Callable, Dict, Tuple
from uuid import uuid4

from chestnut.dates import is_week_key

DEFAULT_BUDGET = 400


class DataFormatError(ValueError):
    """Raised when a stored tree cannot be turned back into AppData."""


def new_purchase_id() -> str:
    return uuid4().hex


def _positive_int(value, field_name: str) -> int:
    # JSON numbers arrive as int or float; 12.0 is accepted, 12.5 is not
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DataFormatError(f"{field_name} must be a number, got {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise DataFormatError(f"{field_name} must be a whole number, got {value!r}")
    if value <= 0:
        raise DataFormatError(f"{field_name} must be positive, got {value!r}")
    return int(value)


@dataclass(frozen=True)
class Purchase:
    id: str
    name: str
    amount: int   # whole dollars, > 0
    date: str     # YYYY-MM-DD, normally inside the owning week

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "amount": self.amount, "date": self.date}

    @staticmethod
    def from_dict(d: dict) -> "Purchase":
        return Purchase(
            id=str(d["id"]),
            name=str(d["name"]),
            amount=_positive_int(d["amount"], "amount"),
            date=str(d["date"]),
        )


@dataclass(frozen=True)
class Week:
    start_date: str                          # the Sunday identifying the week
    budget: int
    purchases: Tuple[Purchase, ...] = ()     # insertion order

    def to_dict(self) -> dict:
        return {
            "startDate": self.start_date,
            "budget": self.budget,
            "purchases": [p.to_dict() for p in self.purchases],
        }

    @staticmethod
    def from_dict(d: dict) -> "Week":
        start_date = d["startDate"]
        if not is_week_key(start_date):
            raise DataFormatError(f"startDate {start_date!r} is not a Sunday date key")
        return Week(
            start_date=start_date,
            budget=_positive_int(d["budget"], "budget"),
            purchases=tuple(Purchase.from_dict(p) for p in d.get("purchases") or []),
        )


@dataclass(frozen=True)
class AppData:
    """Root of all persisted state.

    Every key of `weeks` equals the start_date of its Week. `default_budget`
    seeds the budget of weeks created from now on.
    """
    weeks: Dict[str, Week] = field(default_factory=dict)
    default_budget: int = DEFAULT_BUDGET

    def with_week(self, week: Week) -> "AppData":
        return replace(self, weeks={**self.weeks, week.start_date: week})

    def find_purchase(self, purchase_id: str):
        for week in self.weeks.values():
            for p in week.purchases:
                if p.id == purchase_id:
                    return week, p
        return None

    def to_dict(self) -> dict:
        return {
            "weeks": {key: week.to_dict() for key, week in self.weeks.items()},
            "defaultBudget": self.default_budget,
        }

    @staticmethod
    def from_dict(d: dict) -> "AppData":
        """Build AppData from its JSON tree.

        There is no schema versioning: anything that does not have the expected
        shape raises DataFormatError.
        """
        if not isinstance(d, dict) or not isinstance(d.get("weeks"), dict):
            raise DataFormatError("expected an object with a 'weeks' mapping")
        try:
            weeks = {}
            for key, raw in d["weeks"].items():
                week = Week.from_dict(raw)
                if week.start_date != key:
                    raise DataFormatError(f"week key {key!r} does not match startDate {week.start_date!r}")
                weeks[key] = week
            default_budget = _positive_int(d.get("defaultBudget", DEFAULT_BUDGET), "defaultBudget")
        except DataFormatError:
            raise
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise DataFormatError(f"malformed app data: {e}") from e
        return AppData(weeks=weeks, default_budget=default_budget)


@dataclass(frozen=True)
class WeekSummary:
    start_date: str
    end_date: str
    total_spent: int
    budget: int
    is_over_budget: bool


def empty_app_data(default_budget: int = DEFAULT_BUDGET) -> AppData:
    return AppData(weeks={}, default_budget=default_budget)


def make_purchase(
    name: str,
    amount: int,
    date: str,
    id_factory: Callable[[], str] = new_purchase_id,
) -> Purchase:
    return Purchase(id=id_factory(), name=name, amount=amount, date=date)
