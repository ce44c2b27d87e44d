"""Domain helpers for expense records (model, id assignment, totals)."""
from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional, Sequence

from pydantic import BaseModel, ConfigDict, StrictInt, StrictStr


class ExpensePayload(BaseModel):
    """Body accepted by create/update. Client-sent ids and timestamps are ignored."""

    model_config = ConfigDict(extra="ignore")

    description: StrictStr
    amount: StrictInt


class Expense(BaseModel):
    """
    One stored expense.

    Field declaration order is the order written to the JSON document.
    `amount` is in the smallest currency unit and is never range-checked.
    """

    model_config = ConfigDict(extra="ignore")

    id: StrictInt
    description: StrictStr
    amount: StrictInt
    created_at: datetime
    updated_at: datetime


def next_expense_id(expenses: Iterable[Expense]) -> int:
    """Return 1 + the highest id in use (1 for an empty collection).

    Deleting the current maximum makes its id available again.
    """
    return max((expense.id for expense in expenses), default=0) + 1


def find_expense_index(expenses: Sequence[Expense], expense_id: int) -> Optional[int]:
    """Linear scan for the first record with the given id; storage order is not id order."""
    for idx, expense in enumerate(expenses):
        if expense.id == expense_id:
            return idx
    return None


def duplicate_ids(expenses: Iterable[Expense]) -> set[int]:
    seen: set[int] = set()
    dupes: set[int] = set()
    for expense in expenses:
        if expense.id in seen:
            dupes.add(expense.id)
        seen.add(expense.id)
    return dupes


def total_amount(expenses: Iterable[Expense]) -> int:
    # int is unbounded, the total cannot overflow
    return sum(expense.amount for expense in expenses)
