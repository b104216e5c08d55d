import re
from typing import Iterable, List, Optional

from bson import ObjectId

from helpers.exceptions import ValidationError

NAME_PATTERN = re.compile(r"^[^\W\d_]+(?:\s+[^\W\d_]+)*$")

def serialize_doc(doc):
    """Turn a stored student into a response body; the password hash never leaves the service"""
    doc = dict(doc)
    doc["id"] = str(doc["_id"])
    del doc["_id"]
    doc.pop("password", None)
    if doc.get("profile") is None:
        doc.pop("profile", None)
    return doc

def missing_fields(data: dict, required: Iterable[str]) -> List[str]:
    missing = []
    for field in required:
        value = data.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(field)
    return missing

def validate_student_fields(data: dict, required: Iterable[str]) -> None:
    """Presence check on every required field, then the name format"""
    if missing_fields(data, required):
        raise ValidationError("All fields are required")
    if not NAME_PATTERN.match(data["name"].strip()):
        raise ValidationError("Name must contain only letters and spaces")

def to_object_id(value: str) -> Optional[ObjectId]:
    """Parse a path id; anything that is not an ObjectId cannot name a student"""
    if not ObjectId.is_valid(value):
        return None
    return ObjectId(value)
