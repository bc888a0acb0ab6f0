"""
Form schemas for the five journal entities.

Every field arrives as text from a form (the REST layer may also send JSON
integers for numeric fields). A schema either coerces the input into a typed
record or fails; `validate_form` turns the failure into a field-keyed map
holding the first message per field.
"""
import re
from typing import Any, Dict, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError, field_validator

from app.exceptions import RecordValidationError

SPECIALITY_CODE_PATTERN = re.compile(r"[0-9]{3}")
DIGITS_PATTERN = re.compile(r"[0-9]+")

MIN_NAME_LENGTH = 2
MIN_GRADE = 0
MAX_GRADE = 100

# Largest identifier a 64-bit INTEGER column can hold
MAX_RECORD_ID = 2 ** 63 - 1

NAME_LABELS = {
    "first_name": "First name",
    "last_name": "Last name",
    "name": "Subject name",
    "speciality_name": "Speciality name",
}

REFERENCE_LABELS = {
    "group_id": "group",
    "student_id": "student",
    "teacher_id": "teacher",
    "subject_id": "subject",
}


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _check_name(value: Any, field_name: str) -> str:
    if value is not None and not isinstance(value, str):
        raise ValueError(f"{NAME_LABELS[field_name]} must be text")
    text = _as_text(value)
    if len(text) < MIN_NAME_LENGTH:
        raise ValueError(f"{NAME_LABELS[field_name]} must be at least {MIN_NAME_LENGTH} characters")
    return text


def _check_reference(value: Any, field_name: str) -> int:
    text = _as_text(value)
    digits = text.lstrip("0") or "0"
    if (
        not DIGITS_PATTERN.fullmatch(text)
        or len(digits) > len(str(MAX_RECORD_ID))
        or int(digits) > MAX_RECORD_ID
    ):
        raise ValueError(f"Please select a {REFERENCE_LABELS[field_name]}")
    return int(digits)


class GroupForm(BaseModel):
    speciality_code: int
    speciality_name: str

    @field_validator("speciality_code", mode="before")
    @classmethod
    def check_speciality_code(cls, value):
        if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
            value = f"{value:03d}"
        text = _as_text(value)
        if not SPECIALITY_CODE_PATTERN.fullmatch(text):
            raise ValueError("Speciality code must be exactly 3 digits")
        return int(text)

    @field_validator("speciality_name", mode="before")
    @classmethod
    def check_speciality_name(cls, value, info):
        return _check_name(value, info.field_name)


class TeacherForm(BaseModel):
    first_name: str
    last_name: str

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def check_names(cls, value, info):
        return _check_name(value, info.field_name)


class SubjectForm(BaseModel):
    name: str

    @field_validator("name", mode="before")
    @classmethod
    def check_name(cls, value, info):
        return _check_name(value, info.field_name)


class StudentForm(BaseModel):
    first_name: str
    last_name: str
    group_id: int

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def check_names(cls, value, info):
        return _check_name(value, info.field_name)

    @field_validator("group_id", mode="before")
    @classmethod
    def check_group(cls, value, info):
        return _check_reference(value, info.field_name)


class GradeForm(BaseModel):
    student_id: int
    teacher_id: int
    subject_id: int
    grade: int
    note: Optional[str] = None

    @field_validator("student_id", "teacher_id", "subject_id", mode="before")
    @classmethod
    def check_references(cls, value, info):
        return _check_reference(value, info.field_name)

    @field_validator("grade", mode="before")
    @classmethod
    def check_grade(cls, value):
        text = _as_text(value)
        if not DIGITS_PATTERN.fullmatch(text):
            raise ValueError("Grade must be a number")
        digits = text.lstrip("0") or "0"
        score = int(digits) if len(digits) <= len(str(MAX_GRADE)) else MAX_GRADE + 1
        if not MIN_GRADE <= score <= MAX_GRADE:
            raise ValueError(f"Grade must be between {MIN_GRADE} and {MAX_GRADE}")
        return score


FormT = TypeVar("FormT", bound=BaseModel)


def _first_errors(exc: ValidationError) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    for error in exc.errors():
        field = str(error["loc"][0]) if error["loc"] else "__root__"
        cause = (error.get("ctx") or {}).get("error")
        message = str(cause) if cause is not None else error["msg"]
        errors.setdefault(field, message)
    return errors


def validate_form(schema: Type[FormT], raw: Mapping[str, Any]) -> FormT:
    """
    Validate raw form input against `schema`.

    Missing required fields are treated as empty text so they fail with the
    field's own rule message. Raises RecordValidationError on failure.
    """
    data = {}
    for name, field in schema.model_fields.items():
        value = raw.get(name)
        if value is None:
            if field.is_required():
                data[name] = ""
            continue
        data[name] = value

    try:
        return schema(**data)
    except ValidationError as exc:
        raise RecordValidationError(_first_errors(exc)) from exc
