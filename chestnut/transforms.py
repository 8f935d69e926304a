import logging
from dataclasses import replace
from enum import Enum
from typing import Optional

from chestnut.actions import (
    Action,
    AddPurchase,
    DeletePurchase,
    EditPurchase,
    EnsureWeekExists,
    LoadData,
    SetBudget,
)
from chestnut.dates import is_week_key
from chestnut.domain import AppData, Purchase, Week
from chestnut.functional import Maybe, maybe

logger = logging.getLogger(__name__)


class BudgetPolicy(str, Enum):
    """What a budget edit does to the default budget of future weeks."""

    SYNC_DEFAULT = "sync_default"   # the edited budget also becomes the default
    WEEK_ONLY = "week_only"


def safe_week(data: AppData, week_key: str) -> Maybe[Week]:
    return maybe(data.weeks.get(week_key))


def find_in_week(week: Week, purchase_id: str) -> Optional[Purchase]:
    return next((p for p in week.purchases if p.id == purchase_id), None)


def is_valid_purchase(p: Purchase) -> bool:
    return (
        isinstance(p.amount, int)
        and not isinstance(p.amount, bool)
        and p.amount > 0
        and bool(p.name and p.name.strip())
    )


def ensure_week_exists(data: AppData, week_key: str) -> AppData:
    if week_key in data.weeks:
        return data
    if not is_week_key(week_key):
        logger.debug("ensure_week_exists: %r is not a Sunday date key", week_key)
        return data
    return data.with_week(Week(start_date=week_key, budget=data.default_budget, purchases=()))


def add_purchase(data: AppData, week_key: str, purchase: Purchase) -> AppData:
    week = data.weeks.get(week_key)
    if week is None:
        logger.debug("add_purchase: week %s does not exist", week_key)
        return data
    if not is_valid_purchase(purchase):
        logger.debug("add_purchase: rejected invalid purchase %r", purchase)
        return data
    if data.find_purchase(purchase.id) is not None:
        logger.warning("add_purchase: purchase id %s already exists, ignoring", purchase.id)
        return data
    return data.with_week(replace(week, purchases=week.purchases + (purchase,)))


def edit_purchase(data: AppData, week_key: str, purchase: Purchase) -> AppData:
    week = data.weeks.get(week_key)
    if week is None or not any(p.id == purchase.id for p in week.purchases):
        logger.debug("edit_purchase: %s not found in week %s", purchase.id, week_key)
        return data
    if not is_valid_purchase(purchase):
        logger.debug("edit_purchase: rejected invalid purchase %r", purchase)
        return data
    purchases = tuple(purchase if p.id == purchase.id else p for p in week.purchases)
    return data.with_week(replace(week, purchases=purchases))


def delete_purchase(data: AppData, week_key: str, purchase_id: str) -> AppData:
    week = data.weeks.get(week_key)
    if week is None or not any(p.id == purchase_id for p in week.purchases):
        logger.debug("delete_purchase: %s not found in week %s", purchase_id, week_key)
        return data
    purchases = tuple(p for p in week.purchases if p.id != purchase_id)
    return data.with_week(replace(week, purchases=purchases))


def set_budget(
    data: AppData,
    week_key: str,
    budget: int,
    policy: BudgetPolicy = BudgetPolicy.SYNC_DEFAULT,
) -> AppData:
    week = data.weeks.get(week_key)
    if week is None:
        logger.debug("set_budget: week %s does not exist", week_key)
        return data
    if not isinstance(budget, int) or isinstance(budget, bool) or budget <= 0:
        logger.debug("set_budget: rejected budget %r", budget)
        return data
    updated = data.with_week(replace(week, budget=budget))
    if policy is BudgetPolicy.SYNC_DEFAULT:
        updated = replace(updated, default_budget=budget)
    return updated


def reduce_state(
    state: AppData,
    action: Action,
    policy: BudgetPolicy = BudgetPolicy.SYNC_DEFAULT,
) -> AppData:
    """Apply one action. Rejected or unmatched actions return `state` itself."""
    match action:
        case LoadData(data=data):
            return data
        case EnsureWeekExists(week_key=key):
            return ensure_week_exists(state, key)
        case AddPurchase(week_key=key, purchase=p):
            return add_purchase(state, key, p)
        case EditPurchase(week_key=key, purchase=p):
            return edit_purchase(state, key, p)
        case DeletePurchase(week_key=key, purchase_id=pid):
            return delete_purchase(state, key, pid)
        case SetBudget(week_key=key, budget=budget):
            return set_budget(state, key, budget, policy)
    logger.warning("reduce_state: unknown action %r", action)
    return state
