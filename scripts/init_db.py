"""
Database initialization script - collections and indexes for VoiceSite

Run once (or after schema changes) to create indexes:
    python scripts/init_db.py
    python scripts/init_db.py --env .env.production
    python scripts/init_db.py --demo    # also seed a demo account with an active Store plan
"""

import argparse
import asyncio
import sys
from pathlib import Path
from dotenv import load_dotenv

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

parser = argparse.ArgumentParser(description="Create VoiceSite MongoDB indexes")
parser.add_argument("--env", default=".env", help="Env file to load before connecting")
parser.add_argument("--demo", action="store_true", help="Seed a demo account")
args = parser.parse_args()

# Load environment variables before the settings object is built
load_dotenv(args.env, override=True)

import logging

from app.core.config import settings
from app.db.indexes import create_indexes
from app.db.mongo import connect_to_mongo, close_mongo_connection

logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
logger = logging.getLogger(__name__)

DEMO_EMAIL = "demo@voicesite.local"
DEMO_PASSWORD = "demo1234"


async def seed_demo_account():
    """Creates a demo account and buys it a base Store plan (idempotent)."""
    from app.services import subscription_service, user_service

    user = await user_service.get_user_by_email(DEMO_EMAIL)
    if user:
        logger.info("ℹ️  Demo account already exists")
        return

    user = await user_service.create_user(DEMO_EMAIL, DEMO_PASSWORD, "Demo Owner")
    await subscription_service.recharge(user["id"], "base")
    logger.info(f"✅ Demo account created: {DEMO_EMAIL} / {DEMO_PASSWORD}")


async def main():
    """Main initialization"""
    logger.info("=" * 60)
    logger.info("  VoiceSite Database Setup")
    logger.info("=" * 60 + "\n")

    logger.info(f"🔌 Connecting to MongoDB: {settings.MONGODB_DB_NAME}")
    await connect_to_mongo()

    try:
        await create_indexes()
        logger.info("✅ Indexes created")

        if args.demo:
            await seed_demo_account()

    except Exception as e:
        logger.error(f"\n❌ Error: {e}")
        raise

    finally:
        await close_mongo_connection()

    logger.info("\n" + "=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
