"""
Record stores backed by SQLite.

Stores fetch records by id and persist approved edits. UPDATE statements only
name business columns; creator and creation columns are written once, on insert.
"""

import json
import secrets
import sqlite3
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, Generic, Iterable, List, Optional, TypeVar

from util.logging import logger

from .clock import SystemClock, as_utc
from .db import get_db, transaction
from .errors import NotFound, StoreUnavailable
from .schema import Actor, Artist, Role, TorrentRequestComment, UserLite

T = TypeVar('T')


def _to_db_time(value: datetime) -> str:
    return as_utc(value).isoformat(timespec="microseconds")


def _from_db_time(value: str) -> datetime:
    return as_utc(datetime.fromisoformat(value))


class RecordStore(ABC, Generic[T]):
    """Fetch-by-id and persist for one record type."""

    kind = "record"

    def __init__(self, db_path: Optional[str] = None, clock=None):
        self.db_path = db_path
        self.clock = clock or SystemClock()

    @abstractmethod
    def get(self, record_id: int) -> Optional[T]:
        pass

    @abstractmethod
    def update(self, record: T) -> T:
        """Persist business fields of an existing record and return it as stored."""
        pass

    def _fail(self, operation: str, error: sqlite3.Error, **details) -> StoreUnavailable:
        logger.log_store_error(f"{self.kind}.{operation}", error, details)
        return StoreUnavailable(f"{self.kind} store {operation} failed")


class UserStore:
    """Users: actor resolution for requests and public display identities."""

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path

    def create_user(self, username: str, role: Role = Role.MEMBER, created_at: Optional[datetime] = None):
        """Create a user and return (id, api_token)."""
        token = secrets.token_urlsafe(32)
        created_at = created_at or datetime.now().astimezone()
        try:
            with get_db(self.db_path) as conn:
                with transaction(conn):
                    cursor = conn.execute(
                        "INSERT INTO users (username, class, api_token, created_at) VALUES (?, ?, ?, ?)",
                        (username, role.value, token, _to_db_time(created_at))
                    )
                    user_id = cursor.lastrowid
        except sqlite3.IntegrityError:
            raise ValueError(f"username already exists: {username}") from None
        except sqlite3.Error as e:
            logger.log_store_error("user.create", e, {"username": username})
            raise StoreUnavailable("user store create failed") from e

        logger.log_operation("user.create", "success", {"user_id": user_id, "role": role.value})
        return user_id, token

    def get_actor_by_token(self, token: str) -> Optional[Actor]:
        if not token or not token.strip():
            return None
        try:
            with get_db(self.db_path) as conn:
                row = conn.execute(
                    "SELECT id, class FROM users WHERE api_token = ?", (token.strip(),)
                ).fetchone()
        except sqlite3.Error as e:
            logger.log_store_error("user.get_actor", e)
            raise StoreUnavailable("user store lookup failed") from e

        if row is None:
            return None
        try:
            role = Role(row["class"])
        except ValueError:
            logger.warning(f"User {row['id']} has unknown class {row['class']!r}")
            return None
        return Actor(id=row["id"], role=role)

    def get_user_lites(self, user_ids: Iterable[int]) -> Dict[int, UserLite]:
        ids = sorted(set(user_ids))
        if not ids:
            return {}
        placeholders = ",".join("?" for _ in ids)
        try:
            with get_db(self.db_path) as conn:
                rows = conn.execute(
                    f"SELECT id, username FROM users WHERE id IN ({placeholders})", ids
                ).fetchall()
        except sqlite3.Error as e:
            logger.log_store_error("user.get_lites", e, {"count": len(ids)})
            raise StoreUnavailable("user store lookup failed") from e
        return {row["id"]: UserLite(id=row["id"], username=row["username"]) for row in rows}


class ArtistStore(RecordStore[Artist]):
    kind = Artist.KIND

    _COLUMNS = "id, name, description, pictures, created_by_id, created_at"

    @staticmethod
    def _row_to_artist(row: sqlite3.Row) -> Artist:
        return Artist(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            pictures=json.loads(row["pictures"]),
            created_by_id=row["created_by_id"],
            created_at=_from_db_time(row["created_at"])
        )

    def create(self, name: str, description: str, pictures: List[str], created_by_id: int, created_at: datetime) -> Artist:
        try:
            with get_db(self.db_path) as conn:
                with transaction(conn):
                    cursor = conn.execute(
                        "INSERT INTO artists (name, description, pictures, created_by_id, created_at) VALUES (?, ?, ?, ?, ?)",
                        (name, description, json.dumps(list(pictures)), created_by_id, _to_db_time(created_at))
                    )
                    row = conn.execute(
                        f"SELECT {self._COLUMNS} FROM artists WHERE id = ?", (cursor.lastrowid,)
                    ).fetchone()
        except sqlite3.Error as e:
            raise self._fail("create", e, created_by_id=created_by_id) from e
        return self._row_to_artist(row)

    def get(self, record_id: int) -> Optional[Artist]:
        try:
            with get_db(self.db_path) as conn:
                row = conn.execute(
                    f"SELECT {self._COLUMNS} FROM artists WHERE id = ?", (record_id,)
                ).fetchone()
        except sqlite3.Error as e:
            raise self._fail("get", e, record_id=record_id) from e
        return self._row_to_artist(row) if row else None

    def update(self, record: Artist) -> Artist:
        try:
            with get_db(self.db_path) as conn:
                with transaction(conn):
                    cursor = conn.execute(
                        "UPDATE artists SET name = ?, description = ?, pictures = ? WHERE id = ?",
                        (record.name, record.description, json.dumps(list(record.pictures)), record.id)
                    )
                    if cursor.rowcount == 0:
                        raise NotFound(self.kind, record.id)
                    row = conn.execute(
                        f"SELECT {self._COLUMNS} FROM artists WHERE id = ?", (record.id,)
                    ).fetchone()
        except sqlite3.Error as e:
            raise self._fail("update", e, record_id=record.id) from e
        return self._row_to_artist(row)


class CommentStore(RecordStore[TorrentRequestComment]):
    kind = TorrentRequestComment.KIND

    _COLUMNS = "id, torrent_request_id, user_id, content, created_at, updated_at"

    @staticmethod
    def _row_to_comment(row: sqlite3.Row) -> TorrentRequestComment:
        return TorrentRequestComment(
            id=row["id"],
            torrent_request_id=row["torrent_request_id"],
            user_id=row["user_id"],
            content=row["content"],
            created_at=_from_db_time(row["created_at"]),
            updated_at=_from_db_time(row["updated_at"])
        )

    def create(self, torrent_request_id: int, content: str, user_id: int, created_at: datetime) -> TorrentRequestComment:
        stamp = _to_db_time(created_at)
        try:
            with get_db(self.db_path) as conn:
                with transaction(conn):
                    cursor = conn.execute(
                        "INSERT INTO torrent_request_comments (torrent_request_id, user_id, content, created_at, updated_at) VALUES (?, ?, ?, ?, ?)",
                        (torrent_request_id, user_id, content, stamp, stamp)
                    )
                    row = conn.execute(
                        f"SELECT {self._COLUMNS} FROM torrent_request_comments WHERE id = ?", (cursor.lastrowid,)
                    ).fetchone()
        except sqlite3.Error as e:
            raise self._fail("create", e, torrent_request_id=torrent_request_id) from e
        return self._row_to_comment(row)

    def get(self, record_id: int) -> Optional[TorrentRequestComment]:
        try:
            with get_db(self.db_path) as conn:
                row = conn.execute(
                    f"SELECT {self._COLUMNS} FROM torrent_request_comments WHERE id = ?", (record_id,)
                ).fetchone()
        except sqlite3.Error as e:
            raise self._fail("get", e, record_id=record_id) from e
        return self._row_to_comment(row) if row else None

    def update(self, record: TorrentRequestComment) -> TorrentRequestComment:
        try:
            with get_db(self.db_path) as conn:
                with transaction(conn):
                    cursor = conn.execute(
                        "UPDATE torrent_request_comments SET content = ?, updated_at = ? WHERE id = ?",
                        (record.content, _to_db_time(self.clock.now()), record.id)
                    )
                    if cursor.rowcount == 0:
                        raise NotFound(self.kind, record.id)
                    row = conn.execute(
                        f"SELECT {self._COLUMNS} FROM torrent_request_comments WHERE id = ?", (record.id,)
                    ).fetchone()
        except sqlite3.Error as e:
            raise self._fail("update", e, record_id=record.id) from e
        return self._row_to_comment(row)

    def list_for_request(self, torrent_request_id: int) -> List[TorrentRequestComment]:
        try:
            with get_db(self.db_path) as conn:
                rows = conn.execute(
                    f"SELECT {self._COLUMNS} FROM torrent_request_comments WHERE torrent_request_id = ? ORDER BY created_at, id",
                    (torrent_request_id,)
                ).fetchall()
        except sqlite3.Error as e:
            raise self._fail("list", e, torrent_request_id=torrent_request_id) from e
        return [self._row_to_comment(row) for row in rows]
