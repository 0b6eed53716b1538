#!/usr/bin/env python3
"""
List all dashboard users.

Usage:
    uv run python src/scripts/list_users.py
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import DB_PATH
from core.database import get_connection, init_database, list_users


def main():
    """Print every user in the database."""
    print(f"Reading users from {DB_PATH}...\n")
    conn = get_connection(DB_PATH)
    try:
        init_database(conn)
        users = list_users(conn)
    finally:
        conn.close()

    print(f"Found {len(users)} users\n")
    print("=" * 80)

    for user in users:
        role = "admin" if user["is_admin"] else "user"
        print(f"\nUser: {user['first_name']} {user['last_name']} ({role})")
        print(f"  Email: {user['email']}")
        print(f"  Username: {user['username']}")
        print(f"  ID: {user['id']}")
        print(f"  Created: {user['created_at']}")
        print("-" * 80)

    print("\nDone!")


if __name__ == "__main__":
    main()
