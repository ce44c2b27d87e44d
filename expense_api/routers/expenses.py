from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request, Response

from expense_api.domain.expenses import Expense, ExpensePayload
from expense_api.repositories.json_storage import (
    MalformedStoreError,
    StorageError,
    StorageIOError,
)
from expense_api.services.expense_service import ExpenseNotFoundError, ExpenseService

router = APIRouter(prefix="/expenses", tags=["expenses"])
logger = logging.getLogger(__name__)


def _get_expense_service(request: Request) -> ExpenseService:
    svc = getattr(getattr(request.app, "state", None), "expense_service", None)
    if not svc:
        raise RuntimeError("ExpenseService nao configurado")
    return svc


def _storage_failure(exc: StorageError, action: str) -> HTTPException:
    # falha na leitura (ou arquivo corrompido) sempre conta como falha de carga
    if isinstance(exc, MalformedStoreError):
        action = "loading"
    elif isinstance(exc, StorageIOError):
        action = "loading" if exc.operation == "read" else "saving"
    logger.error("Storage failure while %s expenses: %s", action, exc)
    return HTTPException(500, f"Error {action} expenses")


@router.get("", response_model=list[Expense])
def list_expenses(request: Request):
    svc = _get_expense_service(request)
    try:
        return svc.list()
    except StorageError as exc:
        raise _storage_failure(exc, "loading")


@router.post("/add", response_model=Expense, status_code=201)
def add_expense(payload: ExpensePayload, request: Request):
    svc = _get_expense_service(request)
    try:
        return svc.create(payload.description, payload.amount)
    except StorageError as exc:
        raise _storage_failure(exc, "saving")


@router.get("/summary")
def summary_expenses(request: Request):
    svc = _get_expense_service(request)
    try:
        return {"total": svc.summarize()}
    except StorageError as exc:
        raise _storage_failure(exc, "loading")


@router.put("/update/{expense_id}", response_model=list[Expense])
def update_expense(expense_id: int, payload: ExpensePayload, request: Request):
    svc = _get_expense_service(request)
    try:
        return svc.update(expense_id, payload.description, payload.amount)
    except ExpenseNotFoundError:
        raise HTTPException(404, "Expense not found")
    except StorageError as exc:
        raise _storage_failure(exc, "saving")


@router.delete("/delete/{expense_id}", status_code=204)
def delete_expense(expense_id: int, request: Request):
    svc = _get_expense_service(request)
    try:
        svc.delete(expense_id)
    except ExpenseNotFoundError:
        raise HTTPException(404, "Expense not found")
    except StorageError as exc:
        raise _storage_failure(exc, "saving")
    return Response(status_code=204)


@router.get("/{expense_id}", response_model=Expense)
def get_expense(expense_id: int, request: Request):
    svc = _get_expense_service(request)
    try:
        return svc.get(expense_id)
    except ExpenseNotFoundError:
        raise HTTPException(404, "Expense not found")
    except StorageError as exc:
        raise _storage_failure(exc, "loading")
