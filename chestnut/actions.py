from dataclasses import dataclass
from typing import Union

from chestnut.domain import AppData, Purchase


@dataclass(frozen=True)
class LoadData:
    data: AppData


@dataclass(frozen=True)
class EnsureWeekExists:
    week_key: str


@dataclass(frozen=True)
class AddPurchase:
    week_key: str
    purchase: Purchase


@dataclass(frozen=True)
class EditPurchase:
    week_key: str
    purchase: Purchase   # replaces the purchase with the same id


@dataclass(frozen=True)
class DeletePurchase:
    week_key: str
    purchase_id: str


@dataclass(frozen=True)
class SetBudget:
    week_key: str
    budget: int


Action = Union[LoadData, EnsureWeekExists, AddPurchase, EditPurchase, DeletePurchase, SetBudget]
