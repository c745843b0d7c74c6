"""
MongoDB Connection Utility

MongoDB stores the uploaded documents: one record per successful upload
holding the full extracted text. Documents are never mutated after
insertion; they are only deleted by their owner.
"""
from pymongo import MongoClient, ASCENDING, DESCENDING
from pymongo.database import Database
from pymongo.collection import Collection
from career_assistant.core.config import get_settings
from career_assistant.core.logging import get_logger

settings = get_settings()
logger = get_logger(__name__)

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(settings.mongodb_uri)
    return _client


def get_mongo_db() -> Database:
    """Get the documents database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[settings.mongodb_db]
    return _db


def get_collection(name: str) -> Collection:
    db = get_mongo_db()
    return db[name]


def test_mongo_connection() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        client = get_mongo_client()
        # ping command checks connection
        client.admin.command('ping')
        return True
    except Exception as e:
        logger.warning("MongoDB connection failed: %s", e)
        return False


# Collection name constants (avoid typos)
COLLECTIONS = {
    "documents": "documents",
}


def init_mongo_indexes():
    """
    Create indexes for better query performance.
    Call this once during app startup.
    """
    db = get_mongo_db()

    # Listing is always per user, newest first
    db[COLLECTIONS["documents"]].create_index([
        ("user_id", ASCENDING),
        ("created_at", DESCENDING)
    ])

    logger.info("MongoDB indexes created successfully")
