"""Print every table in the configured database with its columns and row count."""
import sys

from sqlalchemy import func, inspect, select, table
from sqlalchemy.exc import SQLAlchemyError

from edulite.config import settings
from edulite.database import engine


def describe_tables(bind=engine) -> list[str]:
    inspector = inspect(bind)
    lines = []
    with bind.connect() as conn:
        for name in inspector.get_table_names():
            count = conn.execute(select(func.count()).select_from(table(name))).scalar()
            lines.append(f"{name} ({count} rows)")
            for col in inspector.get_columns(name):
                flags = []
                if not col.get("nullable", True):
                    flags.append("NOT NULL")
                if col.get("primary_key"):
                    flags.append("PRIMARY KEY")
                lines.append(f"  - {col['name']}: {col['type']} {' '.join(flags)}".rstrip())
    return lines


if __name__ == "__main__":
    print(f"Database: {settings.database_url}")
    try:
        for line in describe_tables():
            print(line)
    except SQLAlchemyError as e:
        print(f"Error: {e}")
        sys.exit(1)
