#!/usr/bin/env python3
"""Seed database with a sample catalog.

Creates:
- Phone, laptop and tablet variants (several configurations per model)
- One demo user

Seed script is idempotent: variants carry fixed variant_ids, so a re-run
reports them as duplicates instead of inserting twice.

Usage:
    cd services/api
    python -m scripts.seed
"""

import asyncio
import os
import sys

# Add parent to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv

load_dotenv()

from app.services import catalog, users
from app.services.errors import ConflictError
from app.stores.catalog import CatalogStore
from app.stores.postgres import close_db, create_tables, get_session, init_db

# ============================================================
# Sample catalog (grouped the same way as the bulk endpoint)
# ============================================================

SAMPLE_CATALOG = {
    "Phones": [
        {"variant_id": "seed-iphone-13-128-blue-new", "device_type": "Phone", "model": "iPhone 13",
         "condition": "New", "storage": 128, "color": "Blue", "battery": "100%", "price": 599},
        {"variant_id": "seed-iphone-13-128-blue-used", "device_type": "Phone", "model": "iPhone 13",
         "condition": "Used", "storage": 128, "color": "Blue", "battery": "88%", "price": 429},
        {"variant_id": "seed-iphone-13-256-red-used", "device_type": "Phone", "model": "iPhone 13",
         "condition": "Used", "storage": 256, "color": "Red", "battery": "91%", "price": 479},
        {"variant_id": "seed-iphone-15-pro-256-natural-new", "device_type": "Phone", "model": "iPhone 15 Pro",
         "condition": "New", "storage": 256, "color": "Natural", "battery": "100%", "price": 1099},
    ],
    "Laptops": [
        {"variant_id": "seed-mba-m2-256-midnight-8", "device_type": "Laptop", "model": "MacBook Air M2",
         "condition": "Refurbished", "storage": 256, "color": "Midnight", "battery": "95%",
         "cpu": "M2", "ram": 8, "price": 849},
        {"variant_id": "seed-mba-m2-512-midnight-16", "device_type": "Laptop", "model": "MacBook Air M2",
         "condition": "New", "storage": 512, "color": "Midnight", "battery": "100%",
         "cpu": "M2", "ram": 16, "price": 1299},
    ],
    "Tablets": [
        {"variant_id": "seed-ipad-air-64gb-wifi", "device_type": "Tablet", "model": "iPad Air",
         "condition": "Used", "storage": "64GB", "color": "Space Gray", "battery": "90%",
         "connectivity": "WiFi", "price": 329},
        {"variant_id": "seed-ipad-air-256gb-cellular", "device_type": "Tablet", "model": "iPad Air",
         "condition": "New", "storage": "256GB", "color": "Space Gray", "battery": "100%",
         "connectivity": "WiFi + Cellular", "price": 749},
    ],
}

DEMO_USER = {
    "name": "Demo Customer",
    "email": "demo@example.com",
    "phone": "+1 555 0100",
    "address": {"street": "1 Infinite Loop", "city": "Cupertino", "state": "CA", "zipCode": "95014", "country": "US"},
}


async def seed_database() -> None:
    await init_db()
    await create_tables()

    print("🌱 Seeding database...")

    async with get_session() as session:
        store = CatalogStore(session)

        print("\n📱 Creating variants...")
        result = await catalog.bulk_insert_variants(store, SAMPLE_CATALOG)
        for variant in result.succeeded:
            print(f"  ✅ {variant.sku_key}")
        for failure in result.failed:
            print(f"  ⏭️  {failure.variant_id} (exists)")

        print("\n👤 Creating demo user...")
        try:
            user = await users.create_user(store, **DEMO_USER)
            print(f"  ✅ {user.email} ({user.user_id})")
        except ConflictError:
            print(f"  ⏭️  {DEMO_USER['email']} (exists)")

    print("\n✅ Database seeded successfully!")
    await close_db()


if __name__ == "__main__":
    asyncio.run(seed_database())
