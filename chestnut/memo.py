from functools import lru_cache
from typing import Iterable, List

from chestnut.dates import week_end_of
from chestnut.domain import AppData, Week, WeekSummary


def week_total(week: Week) -> int:
    return sum(p.amount for p in week.purchases)


@lru_cache(maxsize=512)
def summarize(week: Week) -> WeekSummary:
    # Week is frozen, so the cache is keyed by (start_date, budget, purchases)
    total = week_total(week)
    return WeekSummary(
        start_date=week.start_date,
        end_date=week_end_of(week.start_date),
        total_spent=total,
        budget=week.budget,
        is_over_budget=total > week.budget,
    )


def all_summaries(data: AppData) -> List[WeekSummary]:
    """One summary per stored week, most recent first."""
    return sorted(
        (summarize(w) for w in data.weeks.values()),
        key=lambda s: s.start_date,
        reverse=True,
    )


def weekly_average(summaries: Iterable[WeekSummary]) -> int:
    totals = [s.total_spent for s in summaries]
    if not totals:
        return 0
    # round half up
    return (2 * sum(totals) + len(totals)) // (2 * len(totals))


def budget_remaining(summary: WeekSummary) -> int:
    return summary.budget - summary.total_spent
