from pydantic import BaseModel
from typing import Optional

REGISTRATION_FIELDS = ("name", "email", "phone", "city", "gender", "courses", "password")
UPDATE_FIELDS = ("name", "email", "phone", "city", "gender", "courses")

# Every field is optional at the model level so a missing one is reported
# as "All fields are required" instead of a schema error.
class StudentBase(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    city: Optional[str] = None
    gender: Optional[str] = None
    courses: Optional[str] = None

class StudentCreate(StudentBase):
    password: Optional[str] = None

class StudentUpdate(StudentBase):
    # Accepted for compatibility with existing clients, never written
    password: Optional[str] = None
