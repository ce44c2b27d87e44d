#!/usr/bin/env python3
"""
Cadastrar uma despesa diretamente no arquivo JSON configurado.

Uso:
  python scripts/add_expense.py --description coffee --amount 350 [--file expense.json]
"""
from __future__ import annotations

import argparse
import sys

from expense_api.core.config import get_settings
from expense_api.core.locking import SingleWriterLock
from expense_api.repositories.json_storage import JSONStorage
from expense_api.services.expense_service import ExpenseService


def main(argv: list[str] | None = None) -> None:
    ap = argparse.ArgumentParser(description="Cadastrar despesa no arquivo JSON")
    ap.add_argument("--description", required=True, help="Descricao (ex.: coffee)")
    ap.add_argument("--amount", required=True, type=int, help="Valor em centavos (inteiro)")
    ap.add_argument("--file", help="Arquivo JSON (default: EXPENSES_FILE ou expense.json)")
    args = ap.parse_args(argv)

    settings = get_settings()
    storage = JSONStorage(args.file or settings.expenses_file)
    svc = ExpenseService(storage, lock=SingleWriterLock(enabled=settings.single_writer))

    expense = svc.create(args.description, args.amount)
    print("OK: despesa cadastrada")
    print(f"  ID: {expense.id}")
    print(f"  Descricao: {expense.description}")
    print(f"  Valor: {expense.amount}")
    print(f"  Total: {svc.summarize()}")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - uso CLI
        sys.stderr.write(f"Erro: {exc}\n")
        raise SystemExit(1)
