# Database setup utilities

import logging

import pymongo
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from useraccounts.config import Settings
from useraccounts.utils.constants import USERS_COLLECTION

# Configure logging
logger = logging.getLogger(__name__)


def get_users_collection(settings: Settings) -> Collection:
    """Connect to MongoDB and return the users collection."""
    try:
        client = pymongo.MongoClient(settings.mongo_uri)
        client.server_info()  # Test connection
        logger.info("Successfully connected to MongoDB")
    except PyMongoError as e:
        logger.error(f"Failed to connect to MongoDB: {str(e)}")
        raise
    return client[settings.database_name][USERS_COLLECTION]


def setup_db_indexes(users: Collection):
    """
    Set up the unique indexes backing account identity.
    This should be called during application startup.
    """
    try:
        users.create_index(
            [("email", pymongo.ASCENDING)], name="email_unique", unique=True
        )
        logger.info("Created unique email index")

        users.create_index(
            [("mobile_number", pymongo.ASCENDING)], name="mobile_number_unique", unique=True
        )
        logger.info("Created unique mobile_number index")
    except PyMongoError as e:
        logger.error(f"Failed to set up database indexes: {e}")
        raise
