"""
SQLite foundation for catalog records.
Creator and creation columns are guarded by triggers so no UPDATE can change them.
"""

import sqlite3
from contextlib import contextmanager
from typing import Generator, Optional

from .config import ensure_db_directory, get_db_path


@contextmanager
def get_db(db_path: Optional[str] = None) -> Generator[sqlite3.Connection, None, None]:
    """Get a SQLite database connection."""
    if db_path is None:
        ensure_db_directory()
        db_path = get_db_path()
    conn = sqlite3.connect(db_path, timeout=10, isolation_level=None)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    try:
        yield conn
    finally:
        conn.close()


@contextmanager
def transaction(conn: sqlite3.Connection) -> Generator[sqlite3.Connection, None, None]:
    """Run a block as one write transaction; roll back on any error."""
    conn.execute("BEGIN IMMEDIATE")
    try:
        yield conn
    except BaseException:
        if conn.in_transaction:
            conn.execute("ROLLBACK")
        raise
    else:
        conn.execute("COMMIT")


def init_db(db_path: Optional[str] = None):
    """Initialize the database with required tables."""
    with get_db(db_path) as conn:
        cursor = conn.cursor()

        cursor.execute('''
            CREATE TABLE IF NOT EXISTS users (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                username TEXT NOT NULL UNIQUE,
                class TEXT NOT NULL DEFAULT 'member',
                api_token TEXT NOT NULL UNIQUE,
                created_at TIMESTAMP NOT NULL
            )
        ''')

        cursor.execute('''
            CREATE TABLE IF NOT EXISTS artists (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                description TEXT NOT NULL DEFAULT '',
                pictures TEXT NOT NULL DEFAULT '[]',  -- JSON array of URLs
                created_by_id INTEGER NOT NULL REFERENCES users(id),
                created_at TIMESTAMP NOT NULL
            )
        ''')

        cursor.execute('''
            CREATE TABLE IF NOT EXISTS torrent_request_comments (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                torrent_request_id INTEGER NOT NULL,
                user_id INTEGER NOT NULL REFERENCES users(id),
                content TEXT NOT NULL,
                created_at TIMESTAMP NOT NULL,
                updated_at TIMESTAMP NOT NULL
            )
        ''')

        cursor.execute('''
            CREATE TRIGGER IF NOT EXISTS artists_owner_immutable
            BEFORE UPDATE OF created_by_id, created_at ON artists
            WHEN NEW.created_by_id IS NOT OLD.created_by_id OR NEW.created_at IS NOT OLD.created_at
            BEGIN
                SELECT RAISE(ABORT, 'artist creator fields are immutable');
            END
        ''')

        cursor.execute('''
            CREATE TRIGGER IF NOT EXISTS comments_owner_immutable
            BEFORE UPDATE OF user_id, created_at ON torrent_request_comments
            WHEN NEW.user_id IS NOT OLD.user_id OR NEW.created_at IS NOT OLD.created_at
            BEGIN
                SELECT RAISE(ABORT, 'comment creator fields are immutable');
            END
        ''')

        # Create indexes for performance
        cursor.execute('CREATE INDEX IF NOT EXISTS idx_comments_request_id ON torrent_request_comments(torrent_request_id, created_at)')


def health_check(db_path: Optional[str] = None) -> bool:
    """Check database health."""
    try:
        with get_db(db_path) as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT name FROM sqlite_master WHERE type='table';")
            table_names = [row[0] for row in cursor.fetchall()]

            required_tables = ['users', 'artists', 'torrent_request_comments']
            return all(table in table_names for table in required_tables)
    except sqlite3.Error:
        return False
