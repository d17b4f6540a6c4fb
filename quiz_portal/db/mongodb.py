from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from quiz_portal.core.config import settings
import logging

logger = logging.getLogger(__name__)

QUIZZES_COLLECTION = "quizzes"
SESSIONS_COLLECTION = "user_responses"


class MongoDB:
    client: AsyncIOMotorClient = None
    
mongodb = MongoDB()

async def connect_to_mongo():
    """Connect to MongoDB, test the connection and ensure indexes"""
    try:
        mongodb.client = AsyncIOMotorClient(settings.mongodb_url)
        # Test connection
        await mongodb.client.admin.command('ping')
        logger.info(f"✓ Connected to MongoDB at {settings.mongodb_url}")
    except Exception as e:
        logger.error(f"✗ Failed to connect to MongoDB: {e}")
        raise
    
    await ensure_indexes(get_database())
    
async def close_mongo_connection():
    """Close MongoDB connection"""
    if mongodb.client:
        mongodb.client.close()
        mongodb.client = None
        logger.info("✓ Closed MongoDB connection")

async def ensure_indexes(db: AsyncIOMotorDatabase):
    """Create the indexes the session lookups rely on"""
    sessions = db[SESSIONS_COLLECTION]
    await sessions.create_index("accessCode", unique=True)
    await sessions.create_index([("quizId", 1), ("completed", 1)])
    logger.info("✓ MongoDB indexes ensured")

def get_database() -> AsyncIOMotorDatabase:
    """Get the database instance"""
    if mongodb.client is None:
        raise RuntimeError("MongoDB client is not connected")
    return mongodb.client[settings.database_name]
