# scripts/setup/init_db.py
"""
Initialize database — creates the vehicle_records table and seeds example data.
Run once before first launch, or after changing the model.
Usage: python scripts/setup/init_db.py [--no-seed]
"""

import argparse
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from sqlalchemy.exc import SQLAlchemyError

from parking_registry.config import settings
from parking_registry.store import RecordStore


def main():
    parser = argparse.ArgumentParser(description="Create tables and seed example records")
    parser.add_argument("--no-seed", action="store_true", help="Skip the three example records")
    args = parser.parse_args()

    print("🗄️  Parking Registry DB Initialization")
    print("=" * 40)
    print(f"📡 Database: {settings.DATABASE_URL}")

    store = RecordStore(settings.DATABASE_URL)
    try:
        store.open()
        store.ping()
        print("✅ Database connection OK, tables created")
    except SQLAlchemyError as e:
        print(f"❌ Cannot initialize database: {e}")
        sys.exit(1)

    with store:
        if not args.no_seed:
            added = store.seed_if_empty()
            print(f"🚗 {added} example records inserted" if added else "📊 Table already has data")

        tables = store.table_names()
        print(f"\n📊 Tables in database ({len(tables)} total):")
        for t in tables:
            print(f"   ✓ {t}")

    print("\n🎉 Database ready! You can now start the backend:")
    print(f"   uvicorn parking_registry.main:app --host 0.0.0.0 --port {settings.BACKEND_PORT} --reload")


if __name__ == "__main__":
    main()
