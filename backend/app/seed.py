"""
Seed the document store with the default showroom catalog.

    python -m app.seed
    python -m app.seed --force --admin-email admin@yelocar.in --admin-password changeme

Existing cars are left alone unless --force is given. With the memory
backend the data only lives as long as this process, so seeding is only
useful against STORE_BACKEND=redis.
"""

import argparse
import asyncio
from datetime import datetime, timezone
from typing import Optional

from fastapi import HTTPException

from app.core.config import get_settings
from app.core.logging import get_logger, setup_logging
from app.infrastructure.store import DocumentStore, join_path
from app.infrastructure.store_factory import close_store, get_store
from app.models.user import Role
from app.models.vehicle import MainFeature, Vehicle
from app.schemas.user import UserCreate
from app.services.auth_service import register_user
from app.services.user_service import update_role

logger = get_logger(__name__)


def _car(id, name, description, price, discount, category, fuel_type, transmission,
         location, year, mileage, features, variants) -> Vehicle:
    return Vehicle(
        id=id,
        name=name,
        description=description,
        price=price,
        discount=discount,
        image_src=f"/images/{id}.png",
        category=category,
        fuel_type=fuel_type,
        transmission=transmission,
        location=location,
        year=year,
        mileage=mileage,
        main_features=[MainFeature(name=f) for f in features],
        all_features=list(features),
        variants=variants,
    )


DEFAULT_CATALOG = [
    _car("ferrari-488-gtb", "Ferrari 488 GTB",
         "A high-performance sports car with a powerful V8 engine and stunning design.",
         36000000, 1000000, "Sports", "Petrol", "Automatic", "Mumbai", 2022, "5,000 km",
         ["V8 Engine", "Carbon Fiber", "Premium Interior"], ["Red", "Black", "Yellow"]),
    _car("honda-city", "Honda City",
         "A reliable and fuel-efficient sedan, perfect for city driving and long commutes.",
         1200000, 50000, "Sedan", "Petrol", "Manual", "Delhi", 2023, "12,000 km",
         ["Fuel Efficient", "Spacious Interior", "Advanced Safety"], ["Blue", "White", "Grey"]),
    _car("mahindra-xuv700", "Mahindra XUV700",
         "A feature-packed SUV offering comfort, safety, and powerful performance.",
         2000000, 75000, "SUV", "Petrol", "Automatic", "Bangalore", 2023, "8,000 km",
         ["7 Seater", "ADAS Features", "Turbo Engine"], ["Black", "White", "Red"]),
    _car("tata-nexon-ev", "Tata Nexon EV",
         "India's best-selling electric SUV, offering great range and modern features.",
         1500000, 0, "Electric", "Electric", "Automatic", "Pune", 2023, "3,000 km",
         ["300km Range", "Zero Emissions", "Fast Charging"], ["White", "Blue", "Black"]),
    _car("maruti-suzuki-swift", "Maruti Suzuki Swift",
         "A popular hatchback known for its peppy engine and agile handling.",
         800000, 20000, "Hatchback", "Petrol", "Manual", "Chennai", 2023, "10,000 km",
         ["Peppy Engine", "Easy Maintenance", "Great Mileage"], ["Silver", "Red", "Blue"]),
    _car("ford-mustang-1976", "Ford Mustang (1967)",
         "An iconic American muscle car, a true classic for enthusiasts.",
         7500000, 250000, "Classic", "Petrol", "Manual", "Mumbai", 1967, "50,000 km",
         ["V8 Power", "Classic Design", "Collector's Item"], ["Yellow", "Black", "Red"]),
]


async def seed_catalog(store: DocumentStore, force: bool = False) -> int:
    """Write the default cars; returns how many were written."""
    now = datetime.now(timezone.utc).isoformat()
    written = 0
    for vehicle in DEFAULT_CATALOG:
        path = join_path("cars", vehicle.id)
        if not force and await store.get(path) is not None:
            logger.info("seed_car_exists", car_id=vehicle.id)
            continue
        record = vehicle.model_copy(update={"created_at": now, "updated_at": now})
        await store.set(path, record.to_record(exclude={"id"}))
        written += 1
    logger.info("seed_catalog_done", written=written, total=len(DEFAULT_CATALOG))
    return written


async def seed_admin(store: DocumentStore, email: str, password: str, full_name: str, phone: str) -> Optional[str]:
    """Create an account and promote it to admin. Returns the uid, or None if the email is taken."""
    try:
        auth = await register_user(store, UserCreate(
            full_name=full_name,
            phone_number=phone,
            email=email,
            password=password,
            confirm_password=password,
        ))
    except HTTPException as e:
        logger.warning("seed_admin_skipped", email=email, detail=e.detail)
        return None
    uid = auth.profile.uid
    await update_role(store, uid, Role.ADMIN, changed_by="seed")
    return uid


async def run(args: argparse.Namespace) -> None:
    setup_logging()
    settings = get_settings()
    if settings.STORE_BACKEND == "memory":
        logger.warning("seed_memory_backend", message="Seeded data will not outlive this process")

    store = get_store()
    try:
        await seed_catalog(store, force=args.force)
        if args.admin_email:
            await seed_admin(store, args.admin_email, args.admin_password, args.admin_name, args.admin_phone)
    finally:
        await close_store()


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the showroom catalog")
    parser.add_argument("--force", action="store_true", help="Overwrite cars that already exist")
    parser.add_argument("--admin-email", help="Also create an admin account with this email")
    parser.add_argument("--admin-password", default="admin123", help="Password for the admin account")
    parser.add_argument("--admin-name", default="Showroom Admin")
    parser.add_argument("--admin-phone", default="9999999999")
    asyncio.run(run(parser.parse_args()))


if __name__ == "__main__":
    main()
