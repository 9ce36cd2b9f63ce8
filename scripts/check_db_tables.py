"""
Report which expected tables are missing from DATABASE_URL

Usage: python scripts/check_db_tables.py
"""
import sys

from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError

from storefront.core.database import get_database_url, get_engine
from storefront.utils.schema_diagnostics import MIGRATIONS, find_missing_tables


def main() -> int:
    url = get_database_url()
    print(f"Checking database: {url.split('@')[-1]}...")

    try:
        engine = get_engine()
        tables = inspect(engine).get_table_names()
        missing = find_missing_tables(engine)
    except (SQLAlchemyError, ValueError) as e:
        print("RESULT: Error connecting/inspecting:")
        print(e)
        return 1

    print(f"RESULT: {len(tables)} Tables found:")
    for t in sorted(tables):
        print(f"- {t}")

    if not missing:
        print("All expected tables exist.")
        return 0

    print(f"MISSING: {', '.join(missing)}")
    for migration in MIGRATIONS:
        if any(table in missing for table in migration.tables):
            print(f"\n-- {migration.name}\n{migration.sql}")
    return 2


if __name__ == "__main__":
    sys.exit(main())
