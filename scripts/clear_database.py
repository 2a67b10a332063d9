"""
Database Clear Script

Deletes the tenant document with every category and item. Afterwards the
API serves the demo dataset again.

Run from project root: python scripts/clear_database.py --yes
"""

import argparse
import asyncio
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from qrmenu.core.config import get_settings, setup_logging
from qrmenu.core.exceptions import MenuError
from qrmenu.services import get_repository
from qrmenu.services.store import get_document_store


async def clear() -> bool:
    store = get_document_store()
    try:
        await store.init()
        counts = await get_repository().clear_all()
    except MenuError as e:
        print(f"❌ Clear failed: {e}")
        return False
    finally:
        await store.close()

    print(f"✅ Deleted {counts['categories']} categories and {counts['items']} items")
    return True


def main() -> int:
    parser = argparse.ArgumentParser(description="Delete all menu data of the tenant")
    parser.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")
    args = parser.parse_args()

    setup_logging()
    settings = get_settings()

    print("=" * 60)
    print("🧹 CLEAR DATABASE")
    print("=" * 60)
    print(f"   Tenant: {settings.tenant_id}")
    print(f"   Environment: {settings.env_mode.value}")

    if not args.yes:
        answer = input("Delete all categories, items and restaurant info? [y/N] ")
        if answer.strip().lower() not in ("y", "yes"):
            print("Aborted")
            return 1

    return 0 if asyncio.run(clear()) else 1


if __name__ == "__main__":
    sys.exit(main())
