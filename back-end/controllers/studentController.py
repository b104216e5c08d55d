import logging
from fastapi import APIRouter, Depends, Request, status
from fastapi.concurrency import run_in_threadpool

from database import StudentStore, EMAIL_TAKEN
from models.Students import StudentCreate, StudentUpdate, REGISTRATION_FIELDS, UPDATE_FIELDS
from helpers.auth import hash_password
from helpers.exceptions import ConflictError, NotFoundError
from helpers.helpers import serialize_doc, validate_student_fields

logger = logging.getLogger(__name__)

router = APIRouter()

def get_store(request: Request) -> StudentStore:
    return request.app.state.store

# Get all students
@router.get("/getstudents")
async def get_students(store: StudentStore = Depends(get_store)):
    students = await store.find_all()
    return [serialize_doc(student) for student in students]

# Register a student
@router.post("/addstudent", status_code=status.HTTP_201_CREATED)
async def add_student(student: StudentCreate, store: StudentStore = Depends(get_store)):
    data = student.model_dump()
    validate_student_fields(data, REGISTRATION_FIELDS)

    if await store.find_by_email(data["email"]):
        raise ConflictError(EMAIL_TAKEN)

    record = {field: data[field] for field in UPDATE_FIELDS}
    record["password"] = await run_in_threadpool(hash_password, data["password"], store.bcrypt_rounds)

    # The unique index still rejects a concurrent registration that got past the lookup
    created = await store.insert(record)
    logger.info(f"Registered student {created['_id']}")
    return {"message": "Student registered successfully"}

# Update student (password and profile untouched)
@router.put("/editstudent/{student_id}")
async def edit_student(student_id: str, student: StudentUpdate, store: StudentStore = Depends(get_store)):
    data = student.model_dump()
    validate_student_fields(data, UPDATE_FIELDS)

    updated = await store.update_by_id(student_id, {field: data[field] for field in UPDATE_FIELDS})
    if updated is None:
        raise NotFoundError("Student not found")

    logger.info(f"Updated student {student_id}")
    return {"message": "Student updated successfully", "student": serialize_doc(updated)}
