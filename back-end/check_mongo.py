"""
MongoDB Connection Test Script

This script tests the connection to MongoDB and verifies that the database
and student collection configured through MONGO_URI are accessible.
"""

import asyncio
import sys
import traceback

from config import get_settings
from database import StudentStore

async def test_connection(store: StudentStore):
    """Test the MongoDB connection and verify database access."""
    print("\n=== Testing MongoDB Connection ===")
    try:
        # Ping the server to check connection
        await store.client.admin.command('ping')
        print("✅ Successfully connected to MongoDB!")
        await store.ensure_indexes()

        # List all databases
        db_list = await store.client.list_database_names()
        print(f"\nAvailable databases: {', '.join(db_list)}")

        # Check if our specific database exists
        db_name = store.database.name
        if db_name in db_list:
            print(f"✅ Database '{db_name}' exists")
        else:
            print(f"❌ Warning: Database '{db_name}' doesn't exist yet")

        collections = await store.list_collection_names()
        collection_name = store.collection.name
        if collection_name in collections:
            count = await store.count()
            print(f"✅ '{collection_name}' collection exists with {count} documents")
        else:
            print(f"❌ Warning: '{collection_name}' collection doesn't exist")

        duplicates = await store.find_duplicate_emails()
        if duplicates:
            print(f"❌ Warning: duplicate emails block the unique index: {', '.join(duplicates)}")

    except Exception as e:
        print(f"❌ Error connecting to MongoDB: {str(e)}")
        print("\nTraceback:")
        traceback.print_exc()
        return False

    return True

async def main():
    store = StudentStore.from_settings(get_settings())
    try:
        return await test_connection(store)
    finally:
        store.close()

if __name__ == "__main__":
    print("MongoDB Connection Tester")
    print("=========================")

    if asyncio.run(main()):
        print("\n✅ MongoDB connection test completed successfully")
    else:
        print("\n❌ MongoDB connection test failed")
        print("Please check MONGO_URI and your network configuration.")
        sys.exit(1)
