"""
app/db/mongo.py

Purpose: MongoDB connection setup

- Initializes Motor client with connection pooling
- Collections: users, profiles, subscriptions, sites, products,
  shop_owners, otp_codes, billing_history, rate_limits
- GridFS buckets for uploaded audio and images
- Health checks and retry logic
- Proper connection lifecycle management
"""

from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorDatabase,
    AsyncIOMotorCollection,
    AsyncIOMotorGridFSBucket,
)
from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError
from typing import Dict, Optional
import asyncio
from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)

# Global MongoDB client
_client: Optional[AsyncIOMotorClient] = None
_database: Optional[AsyncIOMotorDatabase] = None
_buckets: Dict[str, AsyncIOMotorGridFSBucket] = {}

USERS = "users"
PROFILES = "profiles"
SUBSCRIPTIONS = "subscriptions"
SITES = "sites"
PRODUCTS = "products"
SHOP_OWNERS = "shop_owners"
OTP_CODES = "otp_codes"
BILLING_HISTORY = "billing_history"
RATE_LIMITS = "rate_limits"


async def connect_to_mongo():
    """
    Establishes connection to MongoDB with retry logic.
    Called during application startup.
    """
    global _client, _database

    if _client is not None:
        logger.warning("MongoDB client already initialized")
        return

    max_retries = 3
    retry_delay = 2

    for attempt in range(1, max_retries + 1):
        try:
            logger.info(
                f"Attempting to connect to MongoDB (attempt {attempt}/{max_retries})"
            )

            _client = AsyncIOMotorClient(
                settings.MONGODB_URL,
                maxPoolSize=50,
                minPoolSize=5,
                serverSelectionTimeoutMS=5000,
                connectTimeoutMS=10000,
                retryWrites=True,
                retryReads=True,
            )

            _database = _client[settings.MONGODB_DB_NAME]

            # Verify connection
            await _client.admin.command("ping")

            logger.info(
                f"Successfully connected to MongoDB: {settings.MONGODB_DB_NAME}"
            )
            return

        except (ConnectionFailure, ServerSelectionTimeoutError) as e:
            logger.error(
                f"Failed to connect to MongoDB (attempt {attempt}/{max_retries}): {e}"
            )
            _client = None
            _database = None

            if attempt < max_retries:
                logger.info(f"Retrying in {retry_delay} seconds...")
                await asyncio.sleep(retry_delay)
                retry_delay *= 2  # Exponential backoff
            else:
                logger.critical("Failed to connect to MongoDB after all retries")
                raise ConnectionError("Could not establish MongoDB connection") from e


async def close_mongo_connection():
    """
    Closes the MongoDB connection.
    Called during application shutdown.
    """
    global _client, _database

    if _client:
        logger.info("Closing MongoDB connection")
        _client.close()
        _client = None
        _database = None
        _buckets.clear()
        logger.info("MongoDB connection closed")


def use_database(database: AsyncIOMotorDatabase, client: Optional[AsyncIOMotorClient] = None):
    """
    Points the module at an already constructed database.
    Used by scripts and the test suite.
    """
    global _client, _database
    _client = client
    _database = database
    _buckets.clear()


async def check_database_health() -> bool:
    """
    Checks if the database connection is healthy.

    Returns:
        True if connection is healthy, False otherwise
    """
    try:
        if _client is None:
            logger.error("MongoDB client not initialized")
            return False

        await _client.admin.command("ping")
        return True

    except Exception as e:
        logger.error(f"Database health check failed: {str(e)}")
        return False


def get_collection(name: str) -> AsyncIOMotorCollection:
    """
    Returns a collection from the active database.

    Raises:
        RuntimeError: If database is not initialized
    """
    if _database is None:
        raise RuntimeError(
            "Database not initialized. Call connect_to_mongo() during startup."
        )
    return _database[name]


def get_users_collection() -> AsyncIOMotorCollection:
    """
    Accounts that sign in with email and password.

    Fields: id, email, password_hash, full_name, created_at, last_login_at
    """
    return get_collection(USERS)


def get_profiles_collection() -> AsyncIOMotorCollection:
    """
    Fields: id (= user id), username, full_name, phone_number,
    contact_email, avatar_url, updated_at
    """
    return get_collection(PROFILES)


def get_subscriptions_collection() -> AsyncIOMotorCollection:
    """
    One document per user.

    Fields: id, user_id, store_plan, menu_plan, shop_limit, menu_limit,
    store_expires_at, menu_expires_at, created_at, updated_at
    """
    return get_collection(SUBSCRIPTIONS)


def get_sites_collection() -> AsyncIOMotorCollection:
    """
    Published pages.

    Fields: id, user_id, slug, type, name, description, image_url, timing,
    location, owner_name, contact_number, email, whatsapp_number, tagline,
    established_year, state, pincode, address, social_links, is_live,
    created_at, updated_at
    """
    return get_collection(SITES)


def get_products_collection() -> AsyncIOMotorCollection:
    """
    Fields: id, site_id, name, price, description, image_url, is_live,
    created_at, updated_at
    """
    return get_collection(PRODUCTS)


def get_shop_owners_collection() -> AsyncIOMotorCollection:
    """
    Phone numbers allowed to manage a site through OTP login.

    Fields: id, phone, shop_id, created_at
    """
    return get_collection(SHOP_OWNERS)


def get_otp_codes_collection() -> AsyncIOMotorCollection:
    """
    Fields: phone, code, expires_at, created_at
    """
    return get_collection(OTP_CODES)


def get_billing_history_collection() -> AsyncIOMotorCollection:
    """
    Fields: id, user_id, plan_name, amount, status, created_at
    """
    return get_collection(BILLING_HISTORY)


def get_rate_limits_collection() -> AsyncIOMotorCollection:
    """
    Fields: key, requests, created_at, expires_at
    """
    return get_collection(RATE_LIMITS)


def get_gridfs_bucket(bucket_name: str) -> AsyncIOMotorGridFSBucket:
    """
    Returns (and caches) the GridFS bucket used as object storage.
    """
    if _database is None:
        raise RuntimeError(
            "Database not initialized. Call connect_to_mongo() during startup."
        )
    bucket = _buckets.get(bucket_name)
    if bucket is None:
        bucket = AsyncIOMotorGridFSBucket(_database, bucket_name=bucket_name)
        _buckets[bucket_name] = bucket
    return bucket
