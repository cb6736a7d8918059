#!/usr/bin/env python3
"""Quick script to check if the league tables exist in the database"""

import sys
from typing import List, Optional

from sqlalchemy import inspect
from sqlalchemy.engine import Engine

REQUIRED_TABLES = ["player", "league", "leaguemember", "season", "fixture", "match", "matchparticipant", "dispute"]


def check_tables(bind: Optional[Engine] = None) -> List[str]:
    """Print the state of every required table; return the missing ones"""
    if bind is None:
        from league_app.database import engine as bind

    existing_tables = inspect(bind).get_table_names()

    print("Checking for required league tables...")
    print(f"Database: {bind.url}")
    print()

    missing_tables = []
    for table in REQUIRED_TABLES:
        if table in existing_tables:
            print(f"✓ {table} exists")
        else:
            print(f"✗ {table} MISSING")
            missing_tables.append(table)

    print()
    if missing_tables:
        print("ERROR: Missing tables detected!")
        print("Run migrations with: alembic upgrade head")
    else:
        print("All required tables exist!")
    return missing_tables


if __name__ == "__main__":
    try:
        sys.exit(1 if check_tables() else 0)
    except Exception as e:
        print(f"Error checking tables: {e}")
        import traceback

        traceback.print_exc()
        sys.exit(1)
