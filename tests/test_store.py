"""Tests for the ephemeral record store."""

import pytest
from sqlalchemy.exc import OperationalError

from core.errors import (
    IdentifierCollision,
    InvalidTtl,
    RecordExpired,
    RecordNotFound,
    StoreUnavailable,
)
from models.text_record import TextRecord
from records import store as store_module


class TestCreate:
    """RecordStore.create"""

    def test_timestamps(self, store, clock) -> None:
        record = store.create("c1", "v1", 3600)
        assert len(record.id) == 12
        assert record.created_at == clock.now
        assert record.expires_at == clock.now + 3600
        assert record.expires_at > record.created_at

    def test_persisted(self, store, db) -> None:
        record = store.create("c1", "v1", 60)
        row = db.query(TextRecord).filter(TextRecord.id == record.id).one()
        assert (row.cipher_text, row.iv) == ("c1", "v1")

    @pytest.mark.parametrize("ttl", [0, -1, True, 1.5, "60"])
    def test_invalid_ttl(self, store, ttl) -> None:
        with pytest.raises(InvalidTtl):
            store.create("c1", "v1", ttl)

    def test_collision_is_not_an_overwrite(self, store, db, monkeypatch) -> None:
        monkeypatch.setattr(store_module, "generate_id", lambda length: "fixed-id0000")
        store.create("first", "iv1", 60)

        with pytest.raises(IdentifierCollision):
            store.create("second", "iv2", 60)

        rows = db.query(TextRecord).all()
        assert len(rows) == 1
        assert rows[0].cipher_text == "first"

    def test_session_usable_after_collision(self, store, monkeypatch) -> None:
        ids = iter(["same", "same", "other"])
        monkeypatch.setattr(store_module, "generate_id", lambda length: next(ids))
        store.create("a", "b", 60)
        with pytest.raises(IdentifierCollision):
            store.create("a", "b", 60)
        assert store.create("a", "b", 60).id == "other"


class TestRead:
    """RecordStore.read and expiry."""

    def test_live_record(self, store) -> None:
        created = store.create("c1", "v1", 60)
        record = store.read(created.id)
        assert (record.cipher_text, record.iv, record.expires_at) == ("c1", "v1", created.expires_at)

    def test_unknown_id(self, store) -> None:
        with pytest.raises(RecordNotFound):
            store.read("doesnotexist")

    def test_expiry_boundary(self, store, clock) -> None:
        """ttl=1: readable at t0, expired from t0+1 on (expires_at <= now)."""
        record = store.create("c1", "v1", 1)
        assert store.read(record.id).id == record.id

        clock.advance(2)
        with pytest.raises(RecordExpired):
            store.read(record.id)

    def test_expired_exactly_at_expires_at(self, store, clock) -> None:
        record = store.create("c1", "v1", 10)
        clock.now = record.expires_at - 1
        store.read(record.id)
        clock.now = record.expires_at
        with pytest.raises(RecordExpired):
            store.read(record.id)

    def test_expired_record_is_deleted(self, store, clock, db) -> None:
        record = store.create("c1", "v1", 1)
        clock.advance(5)
        with pytest.raises(RecordExpired):
            store.read(record.id)

        assert db.query(TextRecord).count() == 0
        with pytest.raises(RecordNotFound):
            store.read(record.id)

    def test_concurrent_expired_reads(self, session_factory, clock) -> None:
        """Two readers of an expired row both see it gone; neither errors."""
        first = store_module.RecordStore(session_factory(), clock=clock)
        second = store_module.RecordStore(session_factory(), clock=clock)
        record = first.create("c1", "v1", 1)
        clock.advance(3)

        for reader in (first, second):
            with pytest.raises((RecordExpired, RecordNotFound)):
                reader.read(record.id)

    def test_database_failure(self, store, monkeypatch) -> None:
        def _boom(*args, **kwargs):
            raise OperationalError("SELECT", {}, Exception("disk I/O error"))

        monkeypatch.setattr(store.db, "query", _boom)
        with pytest.raises(StoreUnavailable):
            store.read("anything")


class TestDeleteAndSweep:
    """RecordStore.delete / sweep"""

    def test_delete_is_idempotent(self, store) -> None:
        record = store.create("c1", "v1", 60)
        store.delete(record.id)
        store.delete(record.id)
        store.delete("never-existed")
        with pytest.raises(RecordNotFound):
            store.read(record.id)

    def test_sweep_removes_only_expired(self, store, clock, db) -> None:
        short = store.create("c1", "v1", 10)
        long = store.create("c2", "v2", 1000)

        assert store.sweep(clock.now + 10) == 1
        remaining = [row.id for row in db.query(TextRecord).all()]
        assert remaining == [long.id]
        assert short.id not in remaining

    def test_sweep_defaults_to_now(self, store, clock) -> None:
        store.create("c1", "v1", 10)
        assert store.sweep() == 0
        clock.advance(10)
        assert store.sweep() == 1
