"""
Database Seed Script

Imports a complete restaurant dataset into the store. Without --file the
bundled demo dataset is imported, which turns it into real (editable)
tenant data.

Run from project root:
    python scripts/seed_database.py                      # direct, via the configured store
    python scripts/seed_database.py --file menu.json
    python scripts/seed_database.py --url http://localhost:8001 --password admin123
"""

import argparse
import asyncio
import os
import sys
from typing import Optional

import httpx

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from qrmenu.core.config import setup_logging
from qrmenu.core.exceptions import MenuError
from qrmenu.data import get_static_data
from qrmenu.schemas import RestaurantData
from qrmenu.services import get_aggregator
from qrmenu.services.store import get_document_store

DEFAULT_API_URL = "http://localhost:8001"


def load_dataset(path: Optional[str]) -> RestaurantData:
    """Read and validate a RestaurantData JSON file, or the demo dataset."""
    if path is None:
        return get_static_data()
    with open(path, "r", encoding="utf-8") as f:
        return RestaurantData.model_validate_json(f.read())


def summarize(data: RestaurantData) -> None:
    items = sum(len(c.items) for c in data.categories)
    print(f"📋 Restaurant: {data.info.name}")
    print(f"   Categories: {len(data.categories)}")
    print(f"   Items: {items}")


async def seed_direct(data: RestaurantData) -> bool:
    """Import through the aggregator against the configured store."""
    store = get_document_store()
    try:
        await store.init()
        await get_aggregator().migrate_from_json(data)
    except MenuError as e:
        print(f"❌ Seed failed: {e}")
        return False
    finally:
        await store.close()
    print(f"✅ Seeded {store.provider_name} store")
    return True


async def seed_via_api(data: RestaurantData, base_url: str, password: str) -> bool:
    """Import through a running API (login, then POST /api/admin/migrate)."""
    async with httpx.AsyncClient(base_url=base_url, timeout=30.0) as client:
        response = await client.post("/api/admin/login", json={"password": password})
        if response.status_code != 200:
            print(f"❌ Login failed: {response.text[:100]}")
            return False

        response = await client.post(
            "/api/admin/migrate",
            json=data.model_dump(mode="json", by_alias=True, exclude_none=True),
        )
        if response.status_code != 200:
            print(f"❌ Migration failed ({response.status_code}): {response.text[:200]}")
            return False

    print(f"✅ {response.json().get('message')}")
    return True


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed the QR menu store")
    parser.add_argument("--file", help="RestaurantData JSON file (default: demo dataset)")
    parser.add_argument("--url", help=f"Seed through a running API, e.g. {DEFAULT_API_URL}")
    parser.add_argument("--password", default="admin123", help="Admin password for --url")
    args = parser.parse_args()

    setup_logging()

    print("=" * 60)
    print("🌱 SEED DATABASE")
    print("=" * 60)

    try:
        data = load_dataset(args.file)
    except (OSError, ValueError) as e:
        print(f"❌ Could not load dataset: {e}")
        return 1
    summarize(data)

    if args.url:
        ok = asyncio.run(seed_via_api(data, args.url, args.password))
    else:
        ok = asyncio.run(seed_direct(data))
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
