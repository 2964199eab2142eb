#!/usr/bin/env python3

"""
Create the events table on the configured storage backend.

The backend is chosen by STORAGE_BACKEND (sqlite, rqlite or pool), exactly
as the API server does it.

Usage:
    # Create the schema only
    python scripts/init_db.py

    # Create the schema and insert a few sample events around Hyderabad
    python scripts/init_db.py --seed
"""

import argparse
import asyncio
import logging
import sys
from datetime import timedelta
from pathlib import Path

# Add project root to Python path
sys.path.append(str(Path(__file__).parent.parent))

from traffic_events.config.events import EventsConfig
from traffic_events.config.storage import RQLITE, StorageConfig
from traffic_events.db import create_storage
from traffic_events.errors import TrafficEventsError
from traffic_events.event_repository import EventRepository
from traffic_events.models.event import build_events_table
from traffic_events.utils.timeutils import format_storage, utc_now
from sqlalchemy import MetaData

logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=logging.INFO
)
logger = logging.getLogger(__name__)

def sample_events(allowed_types):
    """Sample payloads; the first configured type marks live incidents, the last cleared ones."""
    now = utc_now()
    live, cleared = allowed_types[0], allowed_types[-1]
    return [
        (17.415275, 78.481654, now, now + timedelta(hours=1), 'Heavy traffic on main road', live),
        (17.420000, 78.485000, now, now + timedelta(hours=2), 'Construction work ahead', live),
        (17.410000, 78.475000, now, now + timedelta(minutes=30), 'Minor slowdown', live),
        (17.425000, 78.490000, now, None, 'Clear roads', cleared),
    ]

async def initialize_database(seed: bool) -> int:
    """Create the schema and optionally seed it. Returns the number of seeded events."""
    storage_config = StorageConfig()
    events_config = EventsConfig()
    storage = create_storage(storage_config)

    try:
        if storage_config.backend == RQLITE and not await storage.ping():
            raise TrafficEventsError(
                f"Cannot connect to rqlite at {storage_config.rqlite_url}. Is rqlite running?"
            )

        table = build_events_table(MetaData(), events_config.allowed_types)
        await storage.init_schema(table)
        logger.info("Events table is ready")

        if not seed:
            return 0

        repository = EventRepository(storage, events_config)
        inserted = 0
        for lat, long, start, end, note, event_type in sample_events(events_config.allowed_types):
            event_id = await repository.create({
                'latitude': lat,
                'longitude': long,
                'start_time': format_storage(start),
                'end_time': format_storage(end) if end else None,
                'note': note,
                'type': event_type,
            })
            logger.info(f"Inserted sample event {event_id}: {note}")
            inserted += 1
        return inserted
    finally:
        await storage.close()

def main() -> int:
    parser = argparse.ArgumentParser(description="Initialize the traffic events database")
    parser.add_argument('--seed', action='store_true', help="insert sample events after creating the schema")
    args = parser.parse_args()

    try:
        inserted = asyncio.run(initialize_database(args.seed))
    except (TrafficEventsError, ValueError) as e:
        logger.error(f"Error initializing database: {e}")
        return 1

    logger.info(f"Database initialization completed ({inserted} sample events inserted)")
    return 0

if __name__ == "__main__":
    sys.exit(main())
