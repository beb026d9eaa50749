"""
app/db/indexes.py

Purpose: Database index management

- Creates unique and performance indexes
- Ensures fast lookups and data integrity (unique slugs, emails, phones)
- TTL indexes for automatic cleanup of OTPs and rate-limit windows
"""

from pymongo import ASCENDING, DESCENDING

from app.db.mongo import (
    get_users_collection,
    get_profiles_collection,
    get_subscriptions_collection,
    get_sites_collection,
    get_products_collection,
    get_shop_owners_collection,
    get_otp_codes_collection,
    get_billing_history_collection,
    get_rate_limits_collection,
)
from app.core.logging import get_logger

logger = get_logger(__name__)


async def create_indexes():
    """
    Creates all necessary database indexes.
    This function is idempotent - safe to run multiple times.
    """
    try:
        users = get_users_collection()
        profiles = get_profiles_collection()
        subscriptions = get_subscriptions_collection()
        sites = get_sites_collection()
        products = get_products_collection()
        shop_owners = get_shop_owners_collection()
        otp_codes = get_otp_codes_collection()
        billing = get_billing_history_collection()
        rate_limits = get_rate_limits_collection()

        logger.info("Creating database indexes...")

        # ==============================================
        # USERS / PROFILES
        # ==============================================

        await users.create_index("id", unique=True, name="user_id_unique")
        await users.create_index("email", unique=True, name="user_email_unique")
        await profiles.create_index("id", unique=True, name="profile_id_unique")
        logger.debug("Created indexes on users and profiles")

        # ==============================================
        # SUBSCRIPTIONS / BILLING
        # ==============================================

        await subscriptions.create_index("id", unique=True, name="subscription_id_unique")
        await subscriptions.create_index("user_id", unique=True, name="subscription_user_unique")

        await billing.create_index("id", unique=True, name="billing_id_unique")
        await billing.create_index(
            [("user_id", ASCENDING), ("created_at", DESCENDING)],
            name="billing_user_created_idx"
        )
        logger.debug("Created indexes on subscriptions and billing_history")

        # ==============================================
        # SITES / PRODUCTS
        # ==============================================

        await sites.create_index("id", unique=True, name="site_id_unique")
        await sites.create_index("slug", unique=True, name="site_slug_unique")
        await sites.create_index(
            [("user_id", ASCENDING), ("type", ASCENDING)],
            name="site_user_type_idx"
        )
        await sites.create_index("created_at", name="site_created_idx")

        await products.create_index("id", unique=True, name="product_id_unique")
        await products.create_index("site_id", name="product_site_idx")
        logger.debug("Created indexes on sites and products")

        # ==============================================
        # SHOP OWNER LOGIN
        # ==============================================

        await shop_owners.create_index("id", unique=True, name="owner_id_unique")
        await shop_owners.create_index("phone", unique=True, name="owner_phone_unique")
        await shop_owners.create_index("shop_id", name="owner_shop_idx")

        await otp_codes.create_index("phone", unique=True, name="otp_phone_unique")
        await otp_codes.create_index(
            "expires_at",
            expireAfterSeconds=0,  # Delete when expires_at is reached
            name="otp_expiry_ttl_idx"
        )

        await rate_limits.create_index("key", unique=True, name="rate_limit_key_unique")
        await rate_limits.create_index(
            "expires_at",
            expireAfterSeconds=0,
            name="rate_limit_ttl_idx"
        )
        logger.debug("Created indexes on shop_owners, otp_codes and rate_limits")

        logger.info("All database indexes created successfully")

        site_indexes = await sites.index_information()
        user_indexes = await users.index_information()
        logger.info(
            f"Index summary: Users={len(user_indexes)}, Sites={len(site_indexes)}"
        )

    except Exception as e:
        logger.error(f"Failed to create indexes: {str(e)}", exc_info=True)
        raise


if __name__ == "__main__":
    """
    Run this script directly to create indexes manually.
    """
    import asyncio
    from app.db.mongo import connect_to_mongo, close_mongo_connection

    async def main():
        await connect_to_mongo()
        await create_indexes()
        await close_mongo_connection()

    asyncio.run(main())
