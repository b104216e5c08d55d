from motor.motor_asyncio import AsyncIOMotorClient
from fastapi.concurrency import run_in_threadpool
import logging
import re
from typing import Any, Dict, List, Optional
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError, BulkWriteError

from config import Settings
from helpers.auth import hash_password, DEFAULT_ROUNDS
from helpers.exceptions import ConflictError, StoreError
from helpers.helpers import to_object_id

logger = logging.getLogger(__name__)

EMAIL_TAKEN = "Email already registered"


class StudentStore:
    """Student documents in one MongoDB collection.

    Built from settings, opened with connect() at startup and closed with
    close() at shutdown. Email uniqueness is enforced by a unique index, so
    a concurrent duplicate insert fails in the database and surfaces as a
    ConflictError.
    """

    def __init__(self, client, database_name: str, collection_name: str,
                 bcrypt_rounds: int = DEFAULT_ROUNDS):
        self.client = client
        self.database = client[database_name]
        self.collection = self.database[collection_name]
        self.bcrypt_rounds = bcrypt_rounds

    @classmethod
    def from_settings(cls, settings: Settings) -> "StudentStore":
        client = AsyncIOMotorClient(settings.mongo_uri)
        return cls(client, settings.database_name, settings.collection_name,
                   bcrypt_rounds=settings.bcrypt_rounds)

    async def connect(self):
        try:
            await self.client.admin.command("ping")
        except PyMongoError as e:
            logger.error(f"Failed to connect to MongoDB: {e}")
            raise StoreError("Database unavailable") from e
        logger.info(f"Connected to MongoDB database '{self.database.name}'")
        await self.ensure_indexes()

    def close(self):
        self.client.close()
        logger.info("Closed MongoDB connection")

    async def ensure_indexes(self):
        logger.info("Creating database indexes...")
        duplicate_emails = await self.find_duplicate_emails()
        if duplicate_emails:
            logger.warning(f"Found {len(duplicate_emails)} duplicate email(s): {duplicate_emails}")

        try:
            await self.collection.create_index("email", unique=True)
            logger.info(f"Unique index on {self.collection.name}.email is in place")
        except PyMongoError as e:
            # Existing duplicates block the index; registration still checks by lookup
            logger.warning(f"Failed to create unique index on {self.collection.name}.email: {e}")

    async def find_duplicate_emails(self) -> List[str]:
        pipeline = [
            {"$group": {"_id": "$email", "count": {"$sum": 1}}},
            {"$match": {"_id": {"$ne": None}, "count": {"$gt": 1}}},
        ]
        try:
            groups = await self.collection.aggregate(pipeline).to_list(None)
        except PyMongoError as e:
            logger.error(f"Error checking for duplicate emails: {e}")
            return []
        return [group["_id"] for group in groups]

    async def list_collection_names(self) -> List[str]:
        try:
            return await self.database.list_collection_names()
        except PyMongoError as e:
            logger.error(f"Error listing collections: {e}")
            raise StoreError("Error reaching database") from e

    async def find_all(self) -> List[Dict[str, Any]]:
        try:
            return await self.collection.find().to_list(None)
        except PyMongoError as e:
            logger.error(f"Error getting students: {e}")
            raise StoreError("Error getting students") from e

    async def find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        try:
            return await self.collection.find_one({"email": email})
        except PyMongoError as e:
            logger.error(f"Error looking up student by email: {e}")
            raise StoreError("Error adding student") from e

    async def find_by_id(self, student_id: str) -> Optional[Dict[str, Any]]:
        oid = to_object_id(student_id)
        if oid is None:
            return None
        try:
            return await self.collection.find_one({"_id": oid})
        except PyMongoError as e:
            logger.error(f"Error looking up student {student_id}: {e}")
            raise StoreError("Error getting student") from e

    async def insert(self, record: Dict[str, Any]) -> Dict[str, Any]:
        document = dict(record)
        try:
            result = await self.collection.insert_one(document)
        except DuplicateKeyError as e:
            raise ConflictError(EMAIL_TAKEN) from e
        except PyMongoError as e:
            logger.error(f"Error adding student: {e}")
            raise StoreError("Error adding student") from e
        document["_id"] = result.inserted_id
        return document

    async def update_by_id(self, student_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        oid = to_object_id(student_id)
        if oid is None:
            return None
        try:
            return await self.collection.find_one_and_update(
                {"_id": oid},
                {"$set": fields},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError as e:
            # Only reachable when the unique index exists
            raise ConflictError(EMAIL_TAKEN) from e
        except PyMongoError as e:
            logger.error(f"Error updating student {student_id}: {e}")
            raise StoreError("Error updating student") from e

    # Maintenance operations, run from manage_students.py rather than over HTTP

    async def insert_many(self, records: List[Dict[str, Any]]) -> List[str]:
        documents = []
        for record in records:
            document = dict(record)
            document["password"] = await run_in_threadpool(
                hash_password, document["password"], self.bcrypt_rounds
            )
            documents.append(document)
        if not documents:
            return []
        try:
            result = await self.collection.insert_many(documents)
        except BulkWriteError as e:
            if any(err.get("code") == 11000 for err in e.details.get("writeErrors", [])):
                raise ConflictError(EMAIL_TAKEN) from e
            logger.error(f"Error inserting students: {e}")
            raise StoreError("Error adding students") from e
        except PyMongoError as e:
            logger.error(f"Error inserting students: {e}")
            raise StoreError("Error adding students") from e
        return [str(inserted_id) for inserted_id in result.inserted_ids]

    async def delete_many(self, student_ids: List[str]) -> int:
        oids = []
        for student_id in student_ids:
            oid = to_object_id(student_id)
            if oid is None:
                logger.warning(f"Skipping invalid student id: {student_id}")
                continue
            oids.append(oid)
        if not oids:
            return 0
        try:
            result = await self.collection.delete_many({"_id": {"$in": oids}})
        except PyMongoError as e:
            logger.error(f"Error deleting students: {e}")
            raise StoreError("Error deleting students") from e
        return result.deleted_count

    async def find_by_name(self, name: str) -> Optional[Dict[str, Any]]:
        try:
            return await self.collection.find_one({"name": name})
        except PyMongoError as e:
            logger.error(f"Error finding student: {e}")
            raise StoreError("Error finding student") from e

    async def search(self, city: Optional[str] = None, name: Optional[str] = None,
                     limit: Optional[int] = None) -> List[Dict[str, Any]]:
        query = {}
        if city:
            query["city"] = {"$regex": re.escape(city), "$options": "i"}
        if name:
            query["name"] = {"$regex": re.escape(name), "$options": "i"}
        try:
            cursor = self.collection.find(query)
            if limit:
                cursor = cursor.limit(limit)
            return await cursor.to_list(None)
        except PyMongoError as e:
            logger.error(f"Error finding students: {e}")
            raise StoreError("Error finding students") from e

    async def count(self) -> int:
        try:
            return await self.collection.count_documents({})
        except PyMongoError as e:
            logger.error(f"Error counting students: {e}")
            raise StoreError("Error counting students") from e
