"""The state store: owner of the canonical AppData.

One StateStore is built at process start (or per test) and handed to whoever
needs it. It loads once, then applies actions one at a time through the pure
reducer in chestnut.transforms. Each committed snapshot is published on the
store's event bus; the SnapshotWriter subscribed there persists it in the
background.

Reading is left to the consumer: take `store.data` after a dispatch and run
the aggregation functions (chestnut.memo, chestnut.lazy) over it.
"""

import logging
from dataclasses import replace
from typing import Optional

from chestnut import seed
from chestnut.actions import (
    Action,
    AddPurchase,
    DeletePurchase,
    EditPurchase,
    EnsureWeekExists,
    LoadData,
    SetBudget,
)
from chestnut.dates import DateLike, default_purchase_date
from chestnut.domain import DEFAULT_BUDGET, AppData, Week, empty_app_data, make_purchase
from chestnut.events import DATA_LOADED, STATE_COMMITTED, Event, EventBus
from chestnut.storage import SnapshotWriter
from chestnut.transforms import BudgetPolicy, find_in_week, reduce_state, safe_week

logger = logging.getLogger(__name__)


class StoreNotReadyError(RuntimeError):
    """An action was dispatched before the initial load finished."""


class StateStore:
    def __init__(
        self,
        storage=None,
        *,
        use_seed_data: bool = False,
        budget_policy: BudgetPolicy = BudgetPolicy.SYNC_DEFAULT,
        default_budget: int = DEFAULT_BUDGET,
        bus: Optional[EventBus] = None,
    ):
        if storage is None and not use_seed_data:
            raise ValueError("a storage collaborator is required unless seed data is used")
        self.storage = storage
        self.use_seed_data = use_seed_data
        self.budget_policy = budget_policy
        self.bus = bus or EventBus()
        self._data = empty_app_data(default_budget)
        self._is_loading = True
        self._writer: Optional[SnapshotWriter] = None
        # seed data is never written back over real data
        if storage is not None and not use_seed_data:
            self._writer = SnapshotWriter(storage)
            self.bus.subscribe(STATE_COMMITTED, self._persist)

    @property
    def data(self) -> AppData:
        return self._data

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    async def load(self) -> AppData:
        """Run the one-time initial load; later calls return the current data."""
        if not self._is_loading:
            return self._data
        if self.use_seed_data:
            loaded = seed.generate_seed_data()
            logger.info("Using seed data (%d weeks)", len(loaded.weeks))
        else:
            loaded = await self.storage.load()
        self._data = reduce_state(self._data, LoadData(loaded), self.budget_policy)
        self._is_loading = False
        self.bus.publish(DATA_LOADED, {"data": self._data})
        return self._data

    def dispatch(self, action: Action) -> AppData:
        if self._is_loading:
            raise StoreNotReadyError(f"cannot apply {type(action).__name__} before the initial load")
        if isinstance(action, LoadData):
            raise ValueError("LoadData is reserved for the initial load")
        return self._commit(reduce_state(self._data, action, self.budget_policy), action)

    def _commit(self, new_data: AppData, action) -> AppData:
        if new_data is self._data:
            return self._data
        self._data = new_data
        logger.debug("Committed %s", type(action).__name__)
        # the snapshot is already committed when subscribers run
        try:
            self.bus.publish(STATE_COMMITTED, {"data": new_data, "action": action})
        except Exception:
            logger.exception("A %s subscriber failed after %s", STATE_COMMITTED, type(action).__name__)
        return self._data

    def _persist(self, event: Event, payload: dict) -> None:
        self._writer.submit(payload["data"])

    async def flush(self) -> None:
        if self._writer is not None:
            await self._writer.flush()

    # --- convenience wrappers used by the UI

    def week(self, week_key: str) -> Optional[Week]:
        return self._data.weeks.get(week_key)

    def budget_for(self, week_key: str) -> int:
        week = self.week(week_key)
        return week.budget if week is not None else self._data.default_budget

    def ensure_week(self, week_key: str) -> AppData:
        return self.dispatch(EnsureWeekExists(week_key))

    def add_purchase(self, week_key: str, name: str, amount: int, date: Optional[str] = None,
                     today: Optional[DateLike] = None) -> AppData:
        purchase = make_purchase(name, amount, date or default_purchase_date(week_key, today))
        return self.dispatch(AddPurchase(week_key, purchase))

    def edit_purchase(self, week_key: str, purchase_id: str, name: Optional[str] = None,
                      amount: Optional[int] = None) -> AppData:
        changes = {}
        if name is not None:
            changes["name"] = name
        if amount is not None:
            changes["amount"] = amount
        return self._edit_fields(week_key, purchase_id, **changes)

    def move_purchase(self, week_key: str, purchase_id: str, new_date: str) -> AppData:
        """Re-date a purchase; its week stays the same."""
        return self._edit_fields(week_key, purchase_id, date=new_date)

    def _edit_fields(self, week_key: str, purchase_id: str, **changes) -> AppData:
        existing = (
            safe_week(self._data, week_key)
            .map(lambda w: find_in_week(w, purchase_id))
            .get_or_else(None)
        )
        if existing is None:
            logger.debug("%s not found in week %s", purchase_id, week_key)
            return self._data
        return self.dispatch(EditPurchase(week_key, replace(existing, **changes)))

    def delete_purchase(self, week_key: str, purchase_id: str) -> AppData:
        return self.dispatch(DeletePurchase(week_key, purchase_id))

    def set_budget(self, week_key: str, budget: int) -> AppData:
        return self.dispatch(SetBudget(week_key, budget))
