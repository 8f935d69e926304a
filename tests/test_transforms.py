import pytest

from chestnut.actions import (
    AddPurchase,
    DeletePurchase,
    EditPurchase,
    EnsureWeekExists,
    LoadData,
    SetBudget,
)
from chestnut.domain import AppData, Purchase, Week, empty_app_data
from chestnut.memo import all_summaries
from chestnut.transforms import (
    BudgetPolicy,
    add_purchase,
    delete_purchase,
    ensure_week_exists,
    reduce_state,
    set_budget,
)

WEEK = "2024-01-07"


def make_purchase(id, name="Coffee", amount=5, date=WEEK):
    return Purchase(id=id, name=name, amount=amount, date=date)


def make_data(*purchases, budget=400, default_budget=400):
    week = Week(start_date=WEEK, budget=budget, purchases=tuple(purchases))
    return AppData(weeks={WEEK: week}, default_budget=default_budget)


def test_ensure_week_exists_uses_default_budget():
    data = ensure_week_exists(AppData(weeks={}, default_budget=275), WEEK)
    assert data.weeks[WEEK] == Week(start_date=WEEK, budget=275, purchases=())


def test_ensure_week_exists_is_idempotent():
    once = reduce_state(empty_app_data(), EnsureWeekExists(WEEK))
    twice = reduce_state(once, EnsureWeekExists(WEEK))
    assert twice == once
    assert twice is once


def test_coffee_scenario():
    state = empty_app_data()
    state = reduce_state(state, EnsureWeekExists(WEEK))
    state = reduce_state(state, AddPurchase(WEEK, make_purchase("p1")))

    assert state.weeks[WEEK].purchases == (make_purchase("p1"),)
    assert state.weeks[WEEK].budget == 400


def test_add_purchase_requires_existing_week():
    state = empty_app_data()
    assert reduce_state(state, AddPurchase(WEEK, make_purchase("p1"))) is state


@pytest.mark.parametrize("bad", [
    make_purchase("p1", amount=0),
    make_purchase("p1", amount=-3),
    make_purchase("p1", name=""),
    make_purchase("p1", name="   "),
])
def test_add_purchase_ignores_invalid_input(bad):
    state = make_data()
    assert add_purchase(state, WEEK, bad) is state


def test_add_purchase_ignores_duplicate_id(caplog):
    state = make_data(make_purchase("p1"))
    assert add_purchase(state, WEEK, make_purchase("p1", name="Tea")) is state
    assert "already exists" in caplog.text


def test_add_then_delete_round_trip():
    before = make_data(make_purchase("a"), make_purchase("b"))
    added = reduce_state(before, AddPurchase(WEEK, make_purchase("c")))
    removed = reduce_state(added, DeletePurchase(WEEK, "c"))
    assert removed.weeks[WEEK].purchases == before.weeks[WEEK].purchases


def test_edit_preserves_count_and_order():
    state = make_data(make_purchase("a"), make_purchase("b"), make_purchase("c"))
    edited = reduce_state(state, EditPurchase(WEEK, make_purchase("b", name="Bagel", amount=9)))

    purchases = edited.weeks[WEEK].purchases
    assert [p.id for p in purchases] == ["a", "b", "c"]
    assert purchases[1] == make_purchase("b", name="Bagel", amount=9)
    # the old snapshot is untouched
    assert state.weeks[WEEK].purchases[1].name == "Coffee"


def test_edit_and_delete_misses_are_no_ops():
    state = make_data(make_purchase("a"))
    assert reduce_state(state, EditPurchase(WEEK, make_purchase("zzz"))) is state
    assert reduce_state(state, EditPurchase("2024-01-14", make_purchase("a"))) is state
    assert reduce_state(state, DeletePurchase(WEEK, "zzz")) is state
    assert delete_purchase(state, "2024-01-14", "a") is state


def test_edit_rejects_invalid_replacement():
    state = make_data(make_purchase("a"))
    assert reduce_state(state, EditPurchase(WEEK, make_purchase("a", amount=0))) is state


def test_set_budget_updates_week_and_default():
    state = make_data(default_budget=400)
    updated = reduce_state(state, SetBudget(WEEK, 350))
    assert updated.weeks[WEEK].budget == 350
    assert updated.default_budget == 350


def test_set_budget_week_only_policy_keeps_default():
    state = make_data(default_budget=400)
    updated = reduce_state(state, SetBudget(WEEK, 350), policy=BudgetPolicy.WEEK_ONLY)
    assert updated.weeks[WEEK].budget == 350
    assert updated.default_budget == 400


def test_set_budget_rejects_non_positive_and_missing_week():
    state = make_data()
    assert set_budget(state, WEEK, 0) is state
    assert set_budget(state, WEEK, -10) is state
    assert set_budget(state, "2024-01-14", 300) is state


def test_default_budget_change_does_not_touch_other_weeks():
    state = reduce_state(make_data(budget=400), EnsureWeekExists("2024-01-14"))
    state = reduce_state(state, SetBudget("2024-01-14", 250))
    assert state.weeks[WEEK].budget == 400
    state = reduce_state(state, EnsureWeekExists("2024-01-21"))
    assert state.weeks["2024-01-21"].budget == 250


def test_load_data_replaces_everything():
    loaded = make_data(make_purchase("a"), default_budget=320)
    assert reduce_state(empty_app_data(), LoadData(loaded)) is loaded


def test_unknown_action_leaves_state():
    state = make_data()
    assert reduce_state(state, object()) is state


def test_keys_match_start_dates_after_mutations():
    state = empty_app_data()
    for key in ["2024-01-07", "2023-12-31", "2024-01-14"]:
        state = reduce_state(state, EnsureWeekExists(key))
        state = reduce_state(state, AddPurchase(key, make_purchase(f"p-{key}", date=key)))
        state = reduce_state(state, SetBudget(key, 123))
    assert all(key == week.start_date for key, week in state.weeks.items())


@pytest.mark.parametrize("key", ["not-a-date", "2024-01-08", "2024-1-7", "", None])
def test_ensure_week_ignores_keys_that_are_not_sundays(key):
    state = make_data()
    assert reduce_state(state, EnsureWeekExists(key)) is state
    assert all_summaries(state)[0].start_date == WEEK
