#!/usr/bin/env python3
"""Create the dashboard SQLite3 database and seed the default admin user."""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import DB_PATH, DEFAULT_USER_EMAIL
from core.database import get_connection, init_database, seed_default_user


def create_database():
    """Create the database and tables if they don't exist, then seed."""
    conn = get_connection(DB_PATH)
    try:
        init_database(conn)
        print(f"Database created successfully at: {DB_PATH}")

        if seed_default_user(conn):
            print(f"Default user created: {DEFAULT_USER_EMAIL}")
        else:
            print(f"Default user already present: {DEFAULT_USER_EMAIL}")
    finally:
        conn.close()


if __name__ == "__main__":
    try:
        create_database()
    except ValueError as e:
        print(f"\nError: {e}")
        sys.exit(1)
