# db.py
from motor.motor_asyncio import AsyncIOMotorClient

from core.config import MONGO_DB, MONGO_URL

client = AsyncIOMotorClient(MONGO_URL)
db = client[MONGO_DB]
