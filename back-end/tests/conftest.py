"""
Shared pytest fixtures.

The HTTP tests never talk to MongoDB: the store dependency is replaced by
FakeStudentStore, which keeps documents in memory and rejects a second
insert with the same email the way the unique index does.
"""

import os
import re
from types import SimpleNamespace

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import AsyncClient, ASGITransport

# Settings are loaded lazily, but scripts under test call get_settings()
os.environ.setdefault("MONGO_URI", "mongodb://localhost:27017")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from helpers.auth import hash_password
from helpers.exceptions import ConflictError
from helpers.helpers import to_object_id


class FakeStudentStore:
    """In-memory stand-in for StudentStore."""

    bcrypt_rounds = 4

    def __init__(self):
        self.documents = {}
        self.database = SimpleNamespace(name="studentsDb")
        self.connected = False
        self.closed = False

    async def connect(self):
        self.connected = True

    def close(self):
        self.closed = True

    async def list_collection_names(self):
        return ["studentsReg"] if self.documents else []

    async def find_all(self):
        return [dict(doc) for doc in self.documents.values()]

    async def find_by_email(self, email):
        for doc in self.documents.values():
            if doc.get("email") == email:
                return dict(doc)
        return None

    async def find_by_id(self, student_id):
        oid = to_object_id(student_id)
        doc = self.documents.get(oid) if oid else None
        return dict(doc) if doc else None

    async def insert(self, record):
        if any(doc.get("email") == record.get("email") for doc in self.documents.values()):
            raise ConflictError("Email already registered")
        document = dict(record)
        document["_id"] = ObjectId()
        self.documents[document["_id"]] = document
        return dict(document)

    async def update_by_id(self, student_id, fields):
        oid = to_object_id(student_id)
        if oid is None or oid not in self.documents:
            return None
        self.documents[oid].update(fields)
        return dict(self.documents[oid])

    async def insert_many(self, records):
        ids = []
        for record in records:
            document = dict(record)
            document["password"] = hash_password(document["password"], self.bcrypt_rounds)
            ids.append(str((await self.insert(document))["_id"]))
        return ids

    async def delete_many(self, student_ids):
        deleted = 0
        for student_id in student_ids:
            oid = to_object_id(student_id)
            if oid is not None and self.documents.pop(oid, None) is not None:
                deleted += 1
        return deleted

    async def find_by_name(self, name):
        for doc in self.documents.values():
            if doc.get("name") == name:
                return dict(doc)
        return None

    async def search(self, city=None, name=None, limit=None):
        results = []
        for doc in self.documents.values():
            if city and not re.search(re.escape(city), doc.get("city", ""), re.IGNORECASE):
                continue
            if name and not re.search(re.escape(name), doc.get("name", ""), re.IGNORECASE):
                continue
            results.append(dict(doc))
        return results[:limit] if limit else results

    async def count(self):
        return len(self.documents)

    def with_email(self, email):
        return [doc for doc in self.documents.values() if doc.get("email") == email]


@pytest.fixture
def store():
    return FakeStudentStore()


@pytest.fixture
def jane():
    return {
        "name": "Jane Doe",
        "email": "jane@x.com",
        "phone": "5551234",
        "city": "Lagos",
        "gender": "F",
        "courses": "CS101",
        "password": "secret1",
    }


@pytest_asyncio.fixture
async def client(store):
    """HTTPX client wired to the app with the fake store injected."""
    from app import app
    from controllers.studentController import get_store

    app.dependency_overrides[get_store] = lambda: store
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()
