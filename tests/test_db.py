from __future__ import annotations

import re
import sqlite3
from pathlib import Path

import pytest

from cassettes.db import TapeStore
from cassettes.errors import NotFoundError, StorageError, ValidationError
from cassettes.models import Tape


def _find(store: TapeStore, tape_id: int) -> Tape | None:
    return next((tape for tape in store.list_all() if tape.id == tape_id), None)


def _drop_table(db_path: Path) -> None:
    conn = sqlite3.connect(db_path)
    conn.execute("DROP TABLE tapes")
    conn.commit()
    conn.close()


def test_new_database_starts_empty(store: TapeStore) -> None:
    assert store.list_all() == []


def test_insert_assigns_id_and_timestamp(store: TapeStore) -> None:
    first = store.insert("Alien", "VHS-001")
    second = store.insert("Matrix", "VHS-002")

    assert second > first
    tape = _find(store, second)
    assert tape is not None
    assert (tape.title, tape.tape) == ("Matrix", "VHS-002")
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}", tape.display_date)


def test_list_all_orders_by_id_descending(store: TapeStore) -> None:
    ids = [store.insert(f"Film {i}", f"T{i}") for i in range(3)]

    assert [tape.id for tape in store.list_all()] == sorted(ids, reverse=True)


@pytest.mark.parametrize("title, tape", [("", "VHS-001"), ("Alien", ""), ("  ", "VHS-001")])
def test_insert_rejects_empty_fields(store: TapeStore, title: str, tape: str) -> None:
    with pytest.raises(ValidationError):
        store.insert(title, tape)
    assert store.list_all() == []


def test_update_changes_title_and_tape_only(store: TapeStore) -> None:
    tape_id = store.insert("Alien", "VHS-001")
    before = _find(store, tape_id)

    store.update(tape_id, "Aliens", "VHS-009")

    after = _find(store, tape_id)
    assert after is not None and before is not None
    assert (after.title, after.tape) == ("Aliens", "VHS-009")
    assert after.created_at == before.created_at


def test_update_missing_id_raises_not_found(store: TapeStore) -> None:
    with pytest.raises(NotFoundError):
        store.update(42, "x", "y")


def test_delete_removes_row(store: TapeStore) -> None:
    tape_id = store.insert("Alien", "VHS-001")

    store.delete(tape_id)

    assert _find(store, tape_id) is None


def test_delete_missing_id_raises_not_found(store: TapeStore) -> None:
    tape_id = store.insert("Alien", "VHS-001")
    store.delete(tape_id)

    with pytest.raises(NotFoundError):
        store.delete(tape_id)


def test_missing_table_surfaces_storage_error(store: TapeStore) -> None:
    _drop_table(store.db_path)

    with pytest.raises(StorageError):
        store.list_all()
    with pytest.raises(StorageError):
        store.insert("Alien", "VHS-001")


def test_unreadable_timestamp_surfaces_storage_error(store: TapeStore) -> None:
    conn = sqlite3.connect(store.db_path)
    conn.execute(
        "INSERT INTO tapes (title, tape, timestamp) VALUES (?, ?, ?)",
        ("Alien", "VHS-001", "not a date"),
    )
    conn.commit()
    conn.close()

    with pytest.raises(StorageError):
        store.list_all()


def test_unopenable_path_raises_storage_error(tmp_path: Path) -> None:
    with pytest.raises(StorageError):
        TapeStore(tmp_path / "missing" / "dir" / "tapes.db")


def test_existing_database_is_reused(tmp_path: Path) -> None:
    db_path = tmp_path / "tapes.db"
    first = TapeStore(db_path)
    first.insert("Alien", "VHS-001")
    first.close()

    second = TapeStore(db_path)
    try:
        assert [tape.title for tape in second.list_all()] == ["Alien"]
    finally:
        second.close()
