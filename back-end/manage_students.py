"""
Student maintenance tool

Runs administrative operations directly against the student collection.
None of these are served over HTTP; running them requires the database
credentials in MONGO_URI.

Usage:
    python manage_students.py seed students.json
    python manage_students.py delete 67c96ec3abc973b9628517c3 67cab7ce917faa0c0cbcc9b5
    python manage_students.py find "John Doe"
    python manage_students.py search --city chennai
    python manage_students.py count
"""

import argparse
import asyncio
import json
import logging
import sys
from tabulate import tabulate

from config import get_settings
from database import StudentStore
from helpers.exceptions import RegistryError
from helpers.helpers import missing_fields
from list_students import HEADERS, student_rows
from models.Students import REGISTRATION_FIELDS

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

def load_records(path):
    with open(path, encoding="utf-8") as f:
        records = json.load(f)
    if not isinstance(records, list):
        raise ValueError("Seed file must contain a JSON array of students")
    seen = set()
    for index, record in enumerate(records):
        missing = missing_fields(record, REGISTRATION_FIELDS)
        if missing:
            raise ValueError(f"Student #{index} is missing: {', '.join(missing)}")
        if record["email"] in seen:
            raise ValueError(f"Student #{index} repeats email {record['email']}")
        seen.add(record["email"])
    return records

async def seed(store: StudentStore, args):
    records = load_records(args.file)
    ids = await store.insert_many(records)
    count = await store.count()
    print(f"Data inserted successfully. {len(ids)} students added.")
    print(f"Total students: {count}")

async def delete(store: StudentStore, args):
    deleted = await store.delete_many(args.ids)
    count = await store.count()
    print(f"Data deleted successfully. {deleted} students removed. Remaining students: {count}")

async def find(store: StudentStore, args):
    student = await store.find_by_name(args.name)
    if student is None:
        print("No student found.")
        return
    print(tabulate(student_rows([student]), headers=HEADERS, tablefmt="grid"))

async def search(store: StudentStore, args):
    students = await store.search(city=args.city, name=args.name, limit=args.limit)
    if not students:
        print("No students found.")
        return
    print(tabulate(student_rows(students), headers=HEADERS, tablefmt="grid"))
    print(f"No of Students found: {len(students)}")

async def count(store: StudentStore, args):
    print(f"Total students: {await store.count()}")

def build_parser():
    parser = argparse.ArgumentParser(description="Student registry maintenance")
    commands = parser.add_subparsers(dest="command", required=True)

    seed_cmd = commands.add_parser("seed", help="Insert students from a JSON file")
    seed_cmd.add_argument("file")
    seed_cmd.set_defaults(handler=seed)

    delete_cmd = commands.add_parser("delete", help="Delete students by id")
    delete_cmd.add_argument("ids", nargs="+")
    delete_cmd.set_defaults(handler=delete)

    find_cmd = commands.add_parser("find", help="Find a student by exact name")
    find_cmd.add_argument("name")
    find_cmd.set_defaults(handler=find)

    search_cmd = commands.add_parser("search", help="Case-insensitive search by city and/or name")
    search_cmd.add_argument("--city")
    search_cmd.add_argument("--name")
    search_cmd.add_argument("--limit", type=int)
    search_cmd.set_defaults(handler=search)

    count_cmd = commands.add_parser("count", help="Count students")
    count_cmd.set_defaults(handler=count)
    return parser

async def main(argv=None):
    args = build_parser().parse_args(argv)
    store = StudentStore.from_settings(get_settings())
    try:
        # Ensures the unique email index before any write
        await store.connect()
        await args.handler(store, args)
    except RegistryError as e:
        logger.error(e.message)
        return 1
    finally:
        store.close()
    return 0

if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
