"""
Development seed data.

Run with: python -m app.db.seed

Users and vehicles are upserted, so running it twice is safe. Trips and
status records are wiped and recreated relative to the current UTC day.
"""

import asyncio
import logging
from datetime import timedelta
from typing import List

from sqlalchemy import delete, select

from app.core.config import get_settings
from app.core.security import hash_password
from app.db.session import Database, utcnow
from app.models.trip import Trip
from app.models.user import User
from app.models.vehicle import Vehicle, VehicleStatus, VehicleStatusType
from app.services.vehicle_service import VehicleService

logger = logging.getLogger(__name__)

SEED_PASSWORD = "password123"

BRANDS = [
    ("Toyota", ["Avanza", "Rush", "Innova"]),
    ("Honda", ["Brio", "BR-V", "HR-V"]),
    ("Suzuki", ["Ertiga", "XL7"]),
    ("Mitsubishi", ["Xpander", "Pajero Sport"]),
    ("Daihatsu", ["Xenia", "Terios"]),
]

AREAS = ["B", "D", "E", "F", "H", "K", "L", "N", "W"]


def make_plate(i: int) -> str:
    """B-1000-AA style plate, deterministic in ``i``."""
    area = AREAS[i % len(AREAS)]
    number = 1000 + i
    l1 = chr(65 + (i % 26))
    l2 = chr(65 + ((i * 7) % 26))
    return f"{area}-{number}-{l1}{l2}"


def vehicle_fields(i: int) -> dict:
    brand, models = BRANDS[i % len(BRANDS)]
    return {
        "plate_number": make_plate(i),
        "brand": brand,
        "model": models[i % len(models)],
        "year": 2016 + (i % 10),
    }


async def upsert_user(db, email: str, name: str, role: str) -> User:
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()
    if user is None:
        user = User(email=email, name=name, role=role, password_hash=hash_password(SEED_PASSWORD))
        db.add(user)
        await db.commit()
    return user


async def seed_vehicles(db, count: int = 20) -> List[Vehicle]:
    service = VehicleService(db)
    return [await service.upsert(**vehicle_fields(i)) for i in range(count)]


async def seed(database: Database) -> None:
    await database.create_all()

    async with database.session() as db:
        await db.execute(delete(Trip))
        await db.execute(delete(VehicleStatus))
        await db.commit()

        await upsert_user(db, "admin@example.com", "Admin", "admin")
        user = await upsert_user(db, "user@example.com", "User", "user")

        vehicles = await seed_vehicles(db)
        v1, v2 = vehicles[0], vehicles[1]

        today = utcnow().replace(hour=0, minute=0, second=0, microsecond=0)
        two_days_ago = today - timedelta(days=2)
        yesterday = today - timedelta(days=1)

        db.add_all([
            Trip(
                vehicle_id=v1.id,
                user_id=user.id,
                start_time=two_days_ago.replace(hour=8),
                end_time=two_days_ago.replace(hour=10),
                distance_km=42.1,
                start_place="Indramayu",
                end_place="Bandung",
            ),
            Trip(
                vehicle_id=v1.id,
                user_id=user.id,
                start_time=yesterday.replace(hour=14),
                end_time=yesterday.replace(hour=16),
                distance_km=38.4,
                start_place="Bandung",
                end_place="Indramayu",
            ),
            VehicleStatus(vehicle_id=v1.id, day=today.date(), status=VehicleStatusType.AVAILABLE, odometer=12345),
            VehicleStatus(vehicle_id=v1.id, day=yesterday.date(), status=VehicleStatusType.IN_USE, odometer=12300),
            VehicleStatus(vehicle_id=v2.id, day=today.date(), status=VehicleStatusType.MAINTENANCE, odometer=5800),
        ])
        await db.commit()

    logger.info(f"Seed completed: 2 users, {len(vehicles)} vehicles, 2 trips, 3 status records")


async def main() -> None:
    settings = get_settings()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s | %(levelname)-8s | %(message)s")

    database = Database(settings.database_url)
    try:
        await seed(database)
    finally:
        await database.dispose()


if __name__ == "__main__":
    asyncio.run(main())
