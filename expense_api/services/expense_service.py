"""Expense use cases: every call is one load -> mutate -> save against the JSON file."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from expense_api.core.config import get_settings
from expense_api.core.locking import SingleWriterLock
from expense_api.core.utils import not_before, utc_now
from expense_api.domain.expenses import (
    Expense,
    find_expense_index,
    next_expense_id,
    total_amount,
)
from expense_api.repositories.json_storage import JSONStorage

logger = logging.getLogger(__name__)


class ExpenseError(Exception):
    """Base exception for expense workflow."""


class ExpenseNotFoundError(ExpenseError, LookupError):
    """Raised when no stored expense has the requested id."""

    def __init__(self, expense_id: int):
        super().__init__(f"Expense {expense_id} not found")
        self.expense_id = expense_id


class ExpenseService:
    """
    Record store over a JSONStorage.

    Nothing is cached between calls: the file is the only source of truth.
    Unless a SingleWriterLock is enabled, concurrent mutations can overwrite
    each other (the last save wins). Storage errors propagate unchanged and a
    failed operation never saves.
    """

    def __init__(
        self,
        storage: JSONStorage,
        lock: Optional[SingleWriterLock] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.storage = storage
        self.lock = lock or SingleWriterLock(enabled=False)
        self._now = clock

    def create(self, description: str, amount: int) -> Expense:
        with self.lock.transaction():
            expenses = self.storage.load()
            now = self._now()
            expense = Expense(
                id=next_expense_id(expenses),
                description=description,
                amount=amount,
                created_at=now,
                updated_at=now,
            )
            expenses.append(expense)
            self.storage.save(expenses)
        logger.info("Created expense %s (%d stored)", expense.id, len(expenses))
        return expense

    def list(self) -> list[Expense]:
        return self.storage.load()

    def get(self, expense_id: int) -> Expense:
        expenses = self.storage.load()
        idx = find_expense_index(expenses, expense_id)
        if idx is None:
            logger.warning("Expense %s not found", expense_id)
            raise ExpenseNotFoundError(expense_id)
        return expenses[idx]

    def summarize(self) -> int:
        return total_amount(self.storage.load())

    def update(self, expense_id: int, description: str, amount: int) -> list[Expense]:
        """Replace description/amount of one record and return the whole collection."""
        with self.lock.transaction():
            expenses = self.storage.load()
            idx = find_expense_index(expenses, expense_id)
            if idx is None:
                logger.warning("Update skipped: expense %s not found", expense_id)
                raise ExpenseNotFoundError(expense_id)
            current = expenses[idx]
            expenses[idx] = current.model_copy(
                update={
                    "description": description,
                    "amount": amount,
                    "updated_at": not_before(self._now(), current.updated_at),
                }
            )
            self.storage.save(expenses)
        logger.info("Updated expense %s", expense_id)
        return expenses

    def delete(self, expense_id: int) -> None:
        with self.lock.transaction():
            expenses = self.storage.load()
            idx = find_expense_index(expenses, expense_id)
            if idx is None:
                logger.warning("Delete skipped: expense %s not found", expense_id)
                raise ExpenseNotFoundError(expense_id)
            del expenses[idx]
            self.storage.save(expenses)
        logger.info("Deleted expense %s (%d stored)", expense_id, len(expenses))


def build_expense_service() -> ExpenseService:
    """Wire an ExpenseService from the current settings."""
    settings = get_settings()
    return ExpenseService(
        JSONStorage(settings.expenses_file),
        lock=SingleWriterLock(enabled=settings.single_writer),
    )
