# carmarket/services/db.py
from pymongo import AsyncMongoClient
from typing import Optional
from carmarket.configs import env

# Shared client, created on first use and closed on application shutdown.
db_client: Optional[AsyncMongoClient] = None


async def get_database_client() -> AsyncMongoClient:
    """Returns the MongoDB async client."""
    global db_client
    if db_client is None:
        db_client = AsyncMongoClient(env.get("MONGO_URI"))
    return db_client


async def close_database_client() -> None:
    global db_client
    if db_client is not None:
        await db_client.close()
        db_client = None
