"""
Tests for storage backends and transaction support
"""

import pytest
from decimal import Decimal
from datetime import datetime, timezone
from dataclasses import dataclass

from core_accounting.config import AccountingConfig
from core_accounting.storage import (
    InMemoryStorage, SQLiteStorage, StorageRecord, create_storage
)
from core_accounting.taxonomy import AccountType


@dataclass
class SampleRecord(StorageRecord):
    amount: Decimal = Decimal('0')
    account_type: AccountType = AccountType.BANK


def _record(record_id: str, **fields):
    data = {"id": record_id, "tenant_id": "t1", "name": record_id}
    data.update(fields)
    return data


@pytest.fixture(params=["memory", "sqlite"])
def storage(request, tmp_path):
    if request.param == "memory":
        backend = InMemoryStorage()
    else:
        backend = SQLiteStorage(tmp_path / "accounting.db")
    yield backend
    backend.close()


class TestStorageRecord:
    """Test record serialization"""

    def test_to_dict_converts_decimal_datetime_and_enum(self):
        """Test to dict converts decimal datetime and enum"""
        now = datetime(2025, 1, 10, 12, 0, tzinfo=timezone.utc)
        record = SampleRecord(
            id="r1", created_at=now, updated_at=now,
            amount=Decimal('10.50'), account_type=AccountType.EQUITY
        )

        data = record.to_dict()

        assert data['amount'] == "10.50"
        assert data['account_type'] == "Equity"
        assert data['created_at'] == "2025-01-10T12:00:00+00:00"

    def test_from_dict_parses_timestamps(self):
        """Test from dict parses timestamps"""
        data = {
            "id": "r1",
            "created_at": "2025-01-10T12:00:00+00:00",
            "updated_at": "2025-01-11T12:00:00+00:00",
        }

        record = SampleRecord.from_dict(data)

        assert record.created_at == datetime(2025, 1, 10, 12, 0, tzinfo=timezone.utc)
        assert record.updated_at.day == 11


class TestStorageBackends:
    """Behaviour shared by both backends"""

    def test_save_load_delete(self, storage):
        """Test save load delete"""
        storage.save("accounts", "a1", _record("a1"))

        assert storage.exists("accounts", "a1")
        assert storage.load("accounts", "a1")["name"] == "a1"
        assert storage.count("accounts") == 1

        assert storage.delete("accounts", "a1")
        assert not storage.delete("accounts", "a1")
        assert storage.load("accounts", "a1") is None

    def test_find_matches_every_filter(self, storage):
        """Test find matches every filter"""
        storage.save("accounts", "a1", _record("a1", kind="x"))
        storage.save("accounts", "a2", _record("a2", kind="y"))
        storage.save("accounts", "a3", _record("a3", kind="x", tenant_id="t2"))

        found = storage.find("accounts", {"tenant_id": "t1", "kind": "x"})

        assert [r["id"] for r in found] == ["a1"]

    def test_load_all_keeps_insertion_order_across_updates(self, storage):
        """Test load all keeps insertion order across updates"""
        for record_id in ("a1", "a2", "a3"):
            storage.save("accounts", record_id, _record(record_id))
        storage.save("accounts", "a1", _record("a1", name="renamed"))

        records = storage.load_all("accounts")

        assert [r["id"] for r in records] == ["a1", "a2", "a3"]
        assert records[0]["name"] == "renamed"

    def test_clear_table(self, storage):
        """Test clearing a table"""
        storage.save("accounts", "a1", _record("a1"))
        storage.clear_table("accounts")

        assert storage.count("accounts") == 0

    def test_atomic_commits(self, storage):
        """Test atomic block commits on success"""
        with storage.atomic():
            storage.save("accounts", "a1", _record("a1"))
            storage.save("accounts", "a2", _record("a2"))

        assert storage.count("accounts") == 2

    def test_atomic_rolls_back_on_error(self, storage):
        """Test atomic rolls back on error"""
        storage.save("accounts", "a1", _record("a1"))

        with pytest.raises(RuntimeError):
            with storage.atomic():
                storage.save("accounts", "a1", _record("a1", name="changed"))
                storage.save("accounts", "a2", _record("a2"))
                raise RuntimeError("boom")

        assert storage.load("accounts", "a1")["name"] == "a1"
        assert storage.load("accounts", "a2") is None

    def test_nested_atomic_rolls_back_to_outermost(self, storage):
        """Test nested atomic rolls back to outermost"""
        storage.save("accounts", "a1", _record("a1"))

        with pytest.raises(RuntimeError):
            with storage.atomic():
                storage.save("accounts", "a2", _record("a2"))
                with storage.atomic():
                    storage.save("accounts", "a3", _record("a3"))
                raise RuntimeError("boom")

        assert [r["id"] for r in storage.load_all("accounts")] == ["a1"]


class TestInMemoryStorage:
    """InMemoryStorage specifics"""

    def test_returned_records_are_copies(self):
        """Test returned records are copies"""
        storage = InMemoryStorage()
        storage.save("accounts", "a1", _record("a1"))

        loaded = storage.load("accounts", "a1")
        loaded["name"] = "mutated"

        assert storage.load("accounts", "a1")["name"] == "a1"

    def test_commit_outside_transaction_is_ignored(self):
        """Test commit outside transaction is ignored"""
        storage = InMemoryStorage()
        storage.commit()
        storage.rollback()
        storage.save("accounts", "a1", _record("a1"))

        assert storage.count("accounts") == 1


class TestSQLiteStorage:
    """SQLiteStorage specifics"""

    def test_data_survives_reopen(self, tmp_path):
        """Test data survives reopen"""
        path = tmp_path / "persist.db"
        storage = SQLiteStorage(path)
        storage.save("accounts", "a1", _record("a1"))
        storage.close()

        reopened = SQLiteStorage(path)
        try:
            assert reopened.load("accounts", "a1")["name"] == "a1"
        finally:
            reopened.close()

    def test_table_created_in_rolled_back_transaction_is_recreated(self):
        """Test a table first created inside a failed transaction stays usable"""
        storage = SQLiteStorage()
        try:
            with pytest.raises(RuntimeError):
                with storage.atomic():
                    storage.save("accounts", "a2", _record("a2"))
                    storage.save("journal_entries", "e1", _record("e1"))
                    raise RuntimeError("abort")

            storage.save("journal_entries", "e1", _record("e1"))

            assert storage.load("journal_entries", "e1")["name"] == "e1"
            assert storage.load("accounts", "a2") is None
        finally:
            storage.close()


class TestCreateStorage:
    """Backend selection from database_url"""

    def test_memory_url(self):
        """Test memory:// selects in-memory storage"""
        storage = create_storage(AccountingConfig(database_url="memory://"))
        assert isinstance(storage, InMemoryStorage)

    def test_sqlite_url(self, tmp_path):
        """Test sqlite:/// selects SQLite storage"""
        storage = create_storage(AccountingConfig(database_url=f"sqlite:///{tmp_path / 'a.db'}"))
        try:
            assert isinstance(storage, SQLiteStorage)
        finally:
            storage.close()

    def test_sqlite_memory_url(self):
        """Test sqlite memory url"""
        storage = create_storage(AccountingConfig(database_url="sqlite:///:memory:"))
        try:
            assert storage.db_path == ":memory:"
        finally:
            storage.close()

    def test_unsupported_url(self):
        """Test an unknown database URL is rejected"""
        with pytest.raises(ValueError):
            create_storage(AccountingConfig(database_url="postgresql://localhost/db"))
