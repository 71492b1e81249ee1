"""
Initialize the TinyLink database.

Run this script once to set up the database:
    python init_db.py

The target database is taken from DATABASE_URL (environment or .env).
"""

from tinylink.config import settings
from tinylink.database import build_engine
from tinylink.services.link_store import LinkStore


def init_database():
    """Create the links table and its indexes"""
    print(f"Creating database tables in {settings.DATABASE_URL} ...")
    store = LinkStore(build_engine(settings))
    try:
        store.create_schema()
    finally:
        store.dispose()
    print("Database tables created successfully!")


if __name__ == "__main__":
    print("=" * 50)
    print("TinyLink - Database Initialization")
    print("=" * 50)

    init_database()

    print("\nYou can now start the server with:")
    print("    uvicorn tinylink.main:create_app --factory --port 3000")
