from __future__ import annotations

import sys
import threading
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Garante que o pacote expense_api seja importável durante os testes locais
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from expense_api.core.locking import SingleWriterLock  # noqa: E402
from expense_api.repositories.json_storage import (  # noqa: E402
    JSONStorage,
    MalformedStoreError,
    StorageIOError,
)
from expense_api.services.expense_service import (  # noqa: E402
    ExpenseNotFoundError,
    ExpenseService,
)


class StepClock:
    """Deterministic clock advancing one second per call."""

    def __init__(self, start: datetime) -> None:
        self.current = start

    def __call__(self) -> datetime:
        value = self.current
        self.current = value + timedelta(seconds=1)
        return value


@pytest.fixture()
def storage(tmp_path):
    return JSONStorage(tmp_path / "expense.json")


@pytest.fixture()
def svc(storage):
    return ExpenseService(storage, clock=StepClock(datetime(2024, 5, 1, tzinfo=timezone.utc)))


def test_coffee_scenario(svc, storage):
    created = svc.create("coffee", 350)
    assert created.id == 1
    assert created.amount == 350
    assert created.created_at == created.updated_at

    assert [e.id for e in svc.list()] == [1]
    assert svc.summarize() == 350

    collection = svc.update(1, "tea", 300)
    assert len(collection) == 1
    updated = collection[0]
    assert updated.id == 1
    assert updated.description == "tea"
    assert updated.amount == 300
    assert updated.created_at == created.created_at
    assert updated.updated_at > created.updated_at

    assert svc.delete(1) is None
    assert svc.list() == []
    assert storage.exists()


def test_ids_are_unique_across_creates(svc):
    ids = [svc.create(f"item {n}", n).id for n in range(10)]
    assert ids == list(range(1, 11))
    assert len(set(e.id for e in svc.list())) == 10


def test_deleted_max_id_is_reused(svc):
    svc.create("a", 1)
    svc.create("b", 2)
    svc.delete(2)
    assert svc.create("c", 3).id == 2


def test_deleted_middle_id_is_not_reused(svc):
    for name in ("a", "b", "c"):
        svc.create(name, 1)
    svc.delete(2)
    assert svc.create("d", 1).id == 4
    assert [e.id for e in svc.list()] == [1, 3, 4]


def test_lookups_scan_unordered_storage(svc, storage):
    svc.create("a", 10)
    svc.create("b", 20)
    svc.create("c", 30)
    storage.save(list(reversed(storage.load())))

    assert svc.get(1).description == "a"
    svc.update(1, "a2", 11)
    assert [e.id for e in svc.list()] == [3, 2, 1]
    assert svc.create("d", 40).id == 4


def test_summarize_matches_list(svc):
    assert svc.summarize() == 0
    for amount in (350, -50, 0, 10**20):
        svc.create("x", amount)
    assert svc.summarize() == sum(e.amount for e in svc.list())
    assert svc.summarize() == 300 + 10**20


def test_delete_keeps_other_records_untouched(svc):
    for name in ("a", "b", "c"):
        svc.create(name, 5)
    before = svc.list()
    svc.delete(2)
    after = svc.list()
    assert after == [before[0], before[2]]


def test_not_found_is_non_destructive(svc, storage):
    svc.create("a", 1)
    raw_before = storage.path.read_text(encoding="utf-8")

    with pytest.raises(ExpenseNotFoundError) as excinfo:
        svc.update(99, "x", 1)
    assert excinfo.value.expense_id == 99
    with pytest.raises(ExpenseNotFoundError):
        svc.delete(99)
    with pytest.raises(ExpenseNotFoundError):
        svc.get(99)

    assert storage.path.read_text(encoding="utf-8") == raw_before


def test_update_never_moves_updated_at_backwards(storage):
    start = datetime(2024, 5, 1, tzinfo=timezone.utc)
    times = iter([start, start - timedelta(hours=1)])
    svc = ExpenseService(storage, clock=lambda: next(times))

    created = svc.create("a", 1)
    (updated,) = svc.update(created.id, "b", 2)
    assert updated.updated_at == created.updated_at


def test_missing_store_file_is_not_created_by_reads(svc, storage):
    assert svc.list() == []
    assert svc.summarize() == 0
    assert not storage.exists()


def test_malformed_store_aborts_mutations(svc, storage):
    storage.path.write_text("{broken", encoding="utf-8")
    with pytest.raises(MalformedStoreError):
        svc.create("a", 1)
    with pytest.raises(MalformedStoreError):
        svc.summarize()
    assert storage.path.read_text(encoding="utf-8") == "{broken"


def test_io_error_propagates(tmp_path):
    path = tmp_path / "expense.json"
    path.mkdir()
    svc = ExpenseService(JSONStorage(path))
    with pytest.raises(StorageIOError):
        svc.list()


def test_single_writer_lock_serializes_creates(storage):
    svc = ExpenseService(storage, lock=SingleWriterLock(enabled=True))
    errors: list[Exception] = []

    def worker(n: int) -> None:
        try:
            for i in range(5):
                svc.create(f"w{n}-{i}", 1)
        except Exception as exc:  # pragma: no cover - falha reportada abaixo
            errors.append(exc)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    expenses = svc.list()
    assert len(expenses) == 20
    assert sorted(e.id for e in expenses) == list(range(1, 21))


def test_update_keeps_created_at_of_documents_with_other_offsets(svc, storage):
    storage.path.write_text(
        '[{"id": 1, "description": "coffee", "amount": 350,'
        ' "created_at": "2024-05-01T09:00:00.123456789+05:00",'
        ' "updated_at": "2024-05-01T09:00:00"}]',
        encoding="utf-8",
    )
    before = svc.get(1)

    (updated,) = svc.update(1, "tea", 300)

    assert updated.created_at == before.created_at
    assert updated.updated_at.tzinfo is not None
    assert svc.get(1).created_at == before.created_at
    assert '"created_at": "2024-05-01T09:00:00.123456+05:00"' in storage.path.read_text(encoding="utf-8")
