"""
Database initialization script.

Usage: python -m imapi.db.init_db [--reset]
"""
import sys
from imapi.core.config import settings
from imapi.db.session import init_db

if __name__ == "__main__":
    reset = "--reset" in sys.argv[1:]
    print(f"Initializing database at {settings.DATABASE_URL}...")
    init_db(drop_existing=reset)
    print("Database initialized successfully!")
