import logging
from typing import Optional, Type
from motor.motor_asyncio import AsyncIOMotorClient # async MongoDB driver
from beanie import init_beanie # ODM (Object-Document Mapper) for MongoDB
from pymongo.server_api import ServerApi

from ..configs import Settings
from .user import User
from .friend_request import FriendRequest

logger = logging.getLogger(__name__)

# Every Beanie model used by the application
DOCUMENT_MODELS: list[Type] = [User, FriendRequest]

client: Optional[AsyncIOMotorClient] = None  # one client for the whole app lifetime


def create_client(settings: Settings) -> AsyncIOMotorClient:
    db = settings.db
    return AsyncIOMotorClient(
        db.mongo_uri,
        server_api=ServerApi("1"),
        # Limits how many connections may be established at the same time,
        # not the total size of the pool.
        maxConnecting=db.max_connecting,
        # Requests wait for a free connection once the pool is full.
        maxPoolSize=db.max_pool_size,
        maxIdleTimeMS=int(db.max_idle_time * 1000),
        serverSelectionTimeoutMS=int(db.timeout * 1000),
        socketTimeoutMS=int(db.timeout * 1000),
        tz_aware=False,
    )


async def init_db(settings: Settings) -> AsyncIOMotorClient:
    """
    Connect to MongoDB and initialize Beanie.
    Only one client is ever created.
    """
    global client

    if client is not None:
        return client

    new_client = create_client(settings)
    await new_client.admin.command("ping")
    database = new_client.get_database(settings.db.database_name)

    await init_beanie(database=database, document_models=DOCUMENT_MODELS)
    logger.info("Connected to MongoDB database %s", settings.db.database_name)

    client = new_client
    return client


def close_db() -> None:
    global client

    if client is not None:
        client.close()
        client = None
        logger.info("MongoDB connection closed")
