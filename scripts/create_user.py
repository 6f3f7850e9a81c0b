#!/usr/bin/env python3
"""
Command-line utility to create catalog users and issue their API tokens.
"""

import argparse
import sqlite3
import sys
from pathlib import Path

# Add repository root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from catalog.core.dao import UserStore
from catalog.core.db import init_db
from catalog.core.errors import StoreUnavailable
from catalog.core.schema import Role


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Create a catalog user and print its API token",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s alice                  # Create a member
  %(prog)s bob --staff            # Create a staff user
  %(prog)s carol --db ./other.db  # Use a specific database file

Environment variables:
- DB_PATH=./data/catalog.db (used when --db is not given)
        """
    )

    parser.add_argument(
        "username",
        help="Unique username (shown as the public display identity)"
    )

    parser.add_argument(
        "--staff", "-s",
        action="store_true",
        help="Create the user with the staff role"
    )

    parser.add_argument(
        "--db",
        default=None,
        help="Path to the SQLite database (default: DB_PATH)"
    )

    args = parser.parse_args(argv)

    if not args.username.strip():
        parser.error("username cannot be empty")

    role = Role.STAFF if args.staff else Role.MEMBER

    try:
        init_db(args.db)
        user_id, token = UserStore(args.db).create_user(args.username.strip(), role)
    except ValueError as e:
        print(f"ERROR: {e}")
        return 1
    except (StoreUnavailable, sqlite3.Error) as e:
        print(f"ERROR: Database unavailable: {e}")
        return 1

    print(f"Created {role.value} user {args.username} (id {user_id})")
    print(f"API token: {token}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
