import asyncio
import logging
import sys
from tabulate import tabulate

from config import get_settings
from database import StudentStore
from helpers.exceptions import StoreError

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

HEADERS = ["ID", "Name", "Email", "Phone", "City", "Gender", "Courses"]

def student_rows(students):
    rows = []
    for student in students:
        rows.append([
            str(student.get("_id", "N/A")),
            student.get("name", "N/A"),
            student.get("email", "N/A"),
            student.get("phone", "N/A"),
            student.get("city", "N/A"),
            student.get("gender", "N/A"),
            student.get("courses", "N/A"),
        ])
    return rows

async def list_students(store: StudentStore, limit=10):
    """List students from the database"""
    try:
        students = await store.search(limit=limit)
        if not students:
            print("No students found in the database.")
            return []

        # Display as table
        print(tabulate(student_rows(students), headers=HEADERS, tablefmt="grid"))

        # Get total count
        count = await store.count()
        if count > limit:
            print(f"\nShowing {limit} of {count} total students.")
        else:
            print(f"\nTotal students: {count}")

        return students

    except StoreError as e:
        logger.error(f"Error listing students: {e.message}")
        return []

async def main(limit=20):
    store = StudentStore.from_settings(get_settings())
    try:
        await store.connect()
        print(f"Listing the first {limit} registered students:")
        print("-" * 50)
        await list_students(store, limit)
    finally:
        store.close()

if __name__ == "__main__":
    # Number of students to display
    limit = int(sys.argv[1]) if len(sys.argv) > 1 else 20
    asyncio.run(main(limit))
