"""
Create database tables directly
Development shortcut; production schemas come from alembic migrations
"""

import sys

from app.database import Base, engine
from app import models  # noqa: F401


def main():
    print(f"Creating vault tables on {engine.url.render_as_string(hide_password=True)}...")

    try:
        Base.metadata.create_all(bind=engine)
    except Exception as e:
        print(f"ERROR: Failed to create tables: {e}")
        sys.exit(1)

    print("SUCCESS: All tables created successfully!")
    print("\nTables created:")
    for table in Base.metadata.sorted_tables:
        print(f"  - {table.name}")


if __name__ == '__main__':
    main()
