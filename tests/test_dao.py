"""
SQLite record store tests - persistence, immutable creator columns and failure mapping.
"""

import sqlite3
import pytest
from datetime import datetime, timedelta, timezone

from catalog.core.clock import FixedClock
from catalog.core.dao import ArtistStore, CommentStore, UserStore
from catalog.core.db import get_db, health_check, init_db
from catalog.core.errors import NotFound, StoreUnavailable
from catalog.core.schema import Actor, Role, UserLite

NOW = datetime(2024, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def db_path(tmp_path):
    """Create a temporary database for testing."""
    path = str(tmp_path / "test_catalog.db")
    init_db(path)
    return path


@pytest.fixture
def users(db_path):
    return UserStore(db_path)


@pytest.fixture
def owner_id(users):
    user_id, _ = users.create_user("owner", Role.MEMBER)
    return user_id


class TestDatabase:
    def test_init_creates_tables(self, db_path):
        assert health_check(db_path) is True

    def test_init_is_idempotent(self, db_path):
        init_db(db_path)
        assert health_check(db_path) is True

    def test_health_check_fails_on_empty_database(self, tmp_path):
        assert health_check(str(tmp_path / "empty.db")) is False


class TestUserStore:
    def test_create_and_resolve_actor(self, users):
        user_id, token = users.create_user("alice", Role.STAFF)
        assert users.get_actor_by_token(token) == Actor(id=user_id, role=Role.STAFF)

    def test_unknown_token(self, users):
        users.create_user("alice")
        assert users.get_actor_by_token("not-a-token") is None
        assert users.get_actor_by_token("   ") is None

    def test_duplicate_username_rejected(self, users):
        users.create_user("alice")
        with pytest.raises(ValueError):
            users.create_user("alice")

    def test_unknown_class_yields_no_actor(self, users, db_path):
        user_id, token = users.create_user("mallory")
        with get_db(db_path) as conn:
            conn.execute("UPDATE users SET class = 'root' WHERE id = ?", (user_id,))
        assert users.get_actor_by_token(token) is None

    def test_user_lites(self, users):
        a, _ = users.create_user("alice")
        b, _ = users.create_user("bob", Role.STAFF)
        lites = users.get_user_lites([a, b, b, 999])
        assert lites == {a: UserLite(id=a, username="alice"), b: UserLite(id=b, username="bob")}

    def test_user_lites_empty(self, users):
        assert users.get_user_lites([]) == {}


class TestArtistStore:
    def test_create_and_get(self, db_path, owner_id):
        store = ArtistStore(db_path)
        created = store.create("Beatles", "Band", ["https://example.org/a.jpg"], owner_id, NOW)

        fetched = store.get(created.id)
        assert fetched == created
        assert fetched.pictures == ["https://example.org/a.jpg"]
        assert fetched.created_at == NOW
        assert fetched.created_at.tzinfo is not None

    def test_get_missing(self, db_path):
        assert ArtistStore(db_path).get(12345) is None

    def test_update_only_business_fields(self, db_path, owner_id, users):
        store = ArtistStore(db_path)
        created = store.create("Beatles", "Band", [], owner_id, NOW)
        other_id, _ = users.create_user("other")

        created.name = "Beatles, The"
        created.pictures = ["https://example.org/b.jpg"]
        created.created_by_id = other_id
        created.created_at = NOW + timedelta(days=30)
        updated = store.update(created)

        assert updated.name == "Beatles, The"
        assert updated.pictures == ["https://example.org/b.jpg"]
        assert updated.created_by_id == owner_id
        assert updated.created_at == NOW

    def test_update_missing_raises_not_found(self, db_path, owner_id):
        store = ArtistStore(db_path)
        ghost = store.create("Ghost", "", [], owner_id, NOW)
        ghost.id = 999
        with pytest.raises(NotFound):
            store.update(ghost)

    def test_trigger_blocks_creator_change(self, db_path, owner_id, users):
        store = ArtistStore(db_path)
        created = store.create("Beatles", "Band", [], owner_id, NOW)
        other_id, _ = users.create_user("other")

        with get_db(db_path) as conn:
            with pytest.raises(sqlite3.IntegrityError):
                conn.execute("UPDATE artists SET created_by_id = ? WHERE id = ?", (other_id, created.id))
            with pytest.raises(sqlite3.IntegrityError):
                conn.execute("UPDATE artists SET created_at = ? WHERE id = ?", ("2000-01-01T00:00:00+00:00", created.id))

        assert store.get(created.id).created_by_id == owner_id

    def test_failed_update_rolls_back(self, db_path, owner_id):
        class BrokenReread(ArtistStore):
            _COLUMNS = "id, no_such_column"

        created = ArtistStore(db_path).create("orig", "Band", [], owner_id, NOW)
        created.name = "changed"

        with pytest.raises(StoreUnavailable):
            BrokenReread(db_path).update(created)

        assert ArtistStore(db_path).get(created.id).name == "orig"

    def test_unavailable_database_raises_store_unavailable(self, tmp_path):
        store = ArtistStore(str(tmp_path / "missing" / "nested" / "catalog.db"))
        with pytest.raises(StoreUnavailable):
            store.get(1)

    def test_missing_tables_raise_store_unavailable(self, tmp_path):
        store = ArtistStore(str(tmp_path / "blank.db"))
        with pytest.raises(StoreUnavailable) as exc_info:
            store.get(1)
        assert isinstance(exc_info.value.__cause__, sqlite3.Error)


class TestCommentStore:
    def test_create_sets_both_timestamps(self, db_path, owner_id):
        store = CommentStore(db_path)
        comment = store.create(7, "Any lossless rip?", owner_id, NOW)
        assert comment.created_at == NOW
        assert comment.updated_at == NOW
        assert comment.created_by_id == owner_id

    def test_update_stamps_updated_at_from_clock(self, db_path, owner_id):
        clock = FixedClock(NOW + timedelta(hours=2))
        store = CommentStore(db_path, clock=clock)
        comment = store.create(7, "Any lossless rip?", owner_id, NOW)

        comment.content = "Any 24-bit rip?"
        updated = store.update(comment)

        assert updated.content == "Any 24-bit rip?"
        assert updated.created_at == NOW
        assert updated.updated_at == NOW + timedelta(hours=2)

    def test_failed_update_rolls_back(self, db_path, owner_id):
        class BrokenReread(CommentStore):
            _COLUMNS = "id, no_such_column"

        store = CommentStore(db_path, clock=FixedClock(NOW + timedelta(hours=1)))
        comment = store.create(7, "orig", owner_id, NOW)
        comment.content = "changed"

        with pytest.raises(StoreUnavailable):
            BrokenReread(db_path, clock=FixedClock(NOW + timedelta(hours=1))).update(comment)

        stored = store.get(comment.id)
        assert stored.content == "orig"
        assert stored.updated_at == NOW

    def test_trigger_blocks_author_change(self, db_path, owner_id, users):
        store = CommentStore(db_path)
        comment = store.create(7, "hello", owner_id, NOW)
        other_id, _ = users.create_user("other")

        with get_db(db_path) as conn:
            with pytest.raises(sqlite3.IntegrityError):
                conn.execute("UPDATE torrent_request_comments SET user_id = ? WHERE id = ?", (other_id, comment.id))

    def test_list_for_request_is_flat_and_ordered(self, db_path, owner_id):
        store = CommentStore(db_path)
        second = store.create(7, "second", owner_id, NOW + timedelta(minutes=5))
        first = store.create(7, "first", owner_id, NOW)
        store.create(8, "elsewhere", owner_id, NOW)

        listed = store.list_for_request(7)
        assert [c.id for c in listed] == [first.id, second.id]

    def test_list_for_unknown_request(self, db_path):
        assert CommentStore(db_path).list_for_request(404) == []
