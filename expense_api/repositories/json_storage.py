"""
JSON-file persistence adapter for the expense collection.

The whole collection lives in one JSON array. Every load reads the file from
scratch and every save rewrites it entirely; the write is a plain overwrite,
so a crash mid-write is only safe if the filesystem makes it all-or-nothing.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable
import json

from pydantic import TypeAdapter, ValidationError

from expense_api.domain.expenses import Expense, duplicate_ids

_COLLECTION = TypeAdapter(list[Expense])


class StorageError(Exception):
    """Base class for persistence failures."""


class StorageIOError(StorageError, IOError):
    """Raised when the document cannot be read or written.

    `operation` is "read" or "write" so callers can tell a failed load from a
    failed save.
    """

    def __init__(self, message: str, operation: str = "read") -> None:
        super().__init__(message)
        self.operation = operation


class MalformedStoreError(StorageError):
    """Raised when the document exists but is not a valid expense collection."""


class JSONStorage:
    """Loads/saves the full expense list from/to a single JSON file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> list[Expense]:
        if not self.path.exists():
            return []
        try:
            raw = self.path.read_bytes()
        except OSError as exc:
            raise StorageIOError(f"Unable to read {self.path}: {exc}", operation="read") from exc

        # invalid encoding counts as malformed content
        try:
            payload = json.loads(raw.decode("utf-8"))
        except UnicodeDecodeError as exc:
            raise MalformedStoreError(f"Invalid UTF-8 in {self.path}") from exc
        except json.JSONDecodeError as exc:
            raise MalformedStoreError(f"Corrupted JSON data in {self.path}") from exc
        if payload is None:
            return []
        if not isinstance(payload, list):
            raise MalformedStoreError(f"Expected a JSON array in {self.path}")

        try:
            expenses = _COLLECTION.validate_python(payload)
        except ValidationError as exc:
            raise MalformedStoreError(f"Invalid expense record in {self.path}: {exc.error_count()} error(s)") from exc

        dupes = duplicate_ids(expenses)
        if dupes:
            raise MalformedStoreError(f"Duplicate expense ids in {self.path}: {sorted(dupes)}")
        return expenses

    def save(self, expenses: Iterable[Expense]) -> None:
        data = [expense.model_dump(mode="json") for expense in expenses]
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
        except OSError as exc:
            raise StorageIOError(f"Unable to write {self.path}: {exc}", operation="write") from exc
