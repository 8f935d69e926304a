from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from chestnut.dates import dates_in_week
from chestnut.domain import Purchase


def by_date(date_key: str):
    def _filter(p: Purchase) -> bool:
        return p.date == date_key

    return _filter


def by_name(text: str):
    needle = text.strip().lower()

    def _filter(p: Purchase) -> bool:
        return needle in p.name.lower()

    return _filter


def iter_purchases(
    purchases: Iterable[Purchase], pred: Callable[[Purchase], bool]
) -> Iterator[Purchase]:
    for p in purchases:
        if pred(p):
            yield p


def group_by_date(purchases: Iterable[Purchase]) -> Dict[str, List[Purchase]]:
    """Partition purchases by their date, keeping insertion order inside each group."""
    grouped: Dict[str, List[Purchase]] = {}
    for p in purchases:
        grouped.setdefault(p.date, []).append(p)
    return grouped


def iter_week_days(
    week_key: str,
    purchases: Iterable[Purchase],
    pred: Optional[Callable[[Purchase], bool]] = None,
) -> Iterator[Tuple[str, List[Purchase]]]:
    """Yield (date_key, purchases) for all seven days, empty days included.

    Purchases dated outside the week are not yielded. With `pred`, only the
    purchases it accepts are listed.
    """
    if pred is not None:
        purchases = iter_purchases(purchases, pred)
    grouped = group_by_date(purchases)
    for date_key in dates_in_week(week_key):
        yield date_key, grouped.get(date_key, [])
