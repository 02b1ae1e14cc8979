"""
Seed script for synoptic weather stations.

Creates the principal synoptic stations with a freshly generated security
code each. Existing stations (matched by station code) are left untouched.

Run this script after running database migrations:
    python -m scripts.seed_stations
"""

import asyncio
import secrets
import sys
from pathlib import Path

# Add parent directory to path to import obsdesk modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from obsdesk.crud.station import station as station_crud
from obsdesk.database import async_session, engine
from obsdesk.schemas.station import StationCreate
from obsdesk.utils.logging_config import setup_logging, get_logger

# Setup logging
setup_logging()
logger = get_logger(__name__)


# Principal synoptic stations, keyed by WMO index number
SYNOPTIC_STATIONS = [
    {"name": "Dhaka", "station_code": "41923", "latitude": 23.7780, "longitude": 90.3792},
    {"name": "Chattogram", "station_code": "41978", "latitude": 22.2700, "longitude": 91.8200},
    {"name": "Sylhet", "station_code": "41891", "latitude": 24.9000, "longitude": 91.8833},
    {"name": "Rajshahi", "station_code": "41895", "latitude": 24.3667, "longitude": 88.7000},
    {"name": "Khulna", "station_code": "41947", "latitude": 22.7833, "longitude": 89.5333},
    {"name": "Barishal", "station_code": "41950", "latitude": 22.7500, "longitude": 90.3667},
    {"name": "Rangpur", "station_code": "41859", "latitude": 25.7333, "longitude": 89.2333},
    {"name": "Mymensingh", "station_code": "41886", "latitude": 24.7167, "longitude": 90.4333},
    {"name": "Cox's Bazar", "station_code": "41992", "latitude": 21.4333, "longitude": 91.9333},
]


async def seed_stations():
    """
    Create every station in SYNOPTIC_STATIONS that does not exist yet.

    The generated security codes are logged once; hand them to the station
    admins.
    """
    logger.info("=" * 60)
    logger.info("Starting synoptic stations seeding process")
    logger.info("=" * 60)

    stations_created = 0
    async with async_session() as db:
        for station_data in SYNOPTIC_STATIONS:
            existing = await station_crud.get_by_code(db, station_code=station_data["station_code"])
            if existing:
                logger.info(f"Station {station_data['station_code']} already exists, skipping...")
                continue

            security_code = secrets.token_hex(4).upper()
            station_obj = await station_crud.create(
                db,
                obj_in=StationCreate(security_code=security_code, **station_data),
            )
            stations_created += 1
            logger.info(
                f"✓ Created station: {station_obj.name} ({station_obj.station_code}) "
                f"security code {security_code}"
            )

    logger.info("=" * 60)
    logger.info("✓ Seeding completed successfully!")
    logger.info(f"  Stations created: {stations_created}")
    logger.info("=" * 60)

    await engine.dispose()


def main():
    """Main entry point for the seeding script."""
    try:
        asyncio.run(seed_stations())
    except KeyboardInterrupt:
        logger.warning("\n\n⚠️  Seeding interrupted by user")
        sys.exit(1)
    except Exception as e:
        logger.error(f"\n\n✗ Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
