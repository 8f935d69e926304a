"""Synthetic data for demos and development (CHESTNUT_USE_SEED_DATA)."""

import random
from typing import Optional

from chestnut.dates import DateLike, dates_in_week, shift_week, today_key, week_start_of
from chestnut.domain import DEFAULT_BUDGET, AppData, Purchase, Week

PAST_WEEKS = 5

# (name, min, max) in whole dollars
PURCHASE_POOL = [
    ("Groceries", 35, 120),
    ("Amazon", 12, 85),
    ("Coffee", 5, 8),
    ("Dinner out", 25, 75),
    ("Uber", 10, 35),
    ("Drinks", 15, 60),
    ("Gas", 30, 55),
    ("Haircut", 25, 40),
    ("Target", 20, 90),
    ("Lunch", 12, 22),
    ("Gym smoothie", 8, 14),
    ("Parking", 5, 15),
    ("Movie tickets", 15, 30),
    ("Golf", 30, 65),
    ("Dog food", 25, 45),
    ("Pharmacy", 8, 30),
    ("Dry cleaning", 15, 35),
    ("Spotify", 11, 11),
]


def _budget_for(week_index: int) -> int:
    if week_index <= 1:
        return 400
    if week_index <= 3:
        return 350
    return 300


def generate_seed_data(today: Optional[DateLike] = None, rng: Optional[random.Random] = None) -> AppData:
    """Current week plus PAST_WEEKS earlier weeks of plausible purchases."""
    rng = rng or random.Random()
    current_day = today_key(today)
    this_week = week_start_of(current_day)

    weeks = {}
    seen_ids = set()
    for week_index in range(PAST_WEEKS + 1):
        week_key = shift_week(this_week, -week_index)
        is_current = week_index == 0
        # the current week is still in progress, so it gets fewer purchases
        count = rng.randint(3, 6) if is_current else rng.randint(6, 12)
        days = dates_in_week(week_key)
        if is_current:
            days = [d for d in days if d <= current_day] or days[:1]

        purchases = []
        used = set()
        for _ in range(count):
            name, low, high = rng.choice(PURCHASE_POOL)
            attempts = 0
            while name in used and attempts < 5:
                name, low, high = rng.choice(PURCHASE_POOL)
                attempts += 1
            used.add(name)
            purchase_id = f"seed-{rng.getrandbits(40):010x}"
            while purchase_id in seen_ids:
                purchase_id = f"seed-{rng.getrandbits(40):010x}"
            seen_ids.add(purchase_id)
            purchases.append(Purchase(
                id=purchase_id,
                name=name,
                amount=rng.randint(low, high),
                date=rng.choice(days),
            ))

        purchases.sort(key=lambda p: p.date)
        weeks[week_key] = Week(start_date=week_key, budget=_budget_for(week_index), purchases=tuple(purchases))

    return AppData(weeks=weeks, default_budget=DEFAULT_BUDGET)
