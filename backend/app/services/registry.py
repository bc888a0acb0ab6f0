# app/services/registry.py
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Type

from pydantic import BaseModel

from ..schemas.records import GroupForm, StudentForm, TeacherForm, SubjectForm, GradeForm
from .records_service import (
    RecordService, GroupService, StudentService, TeacherService, SubjectService, GradeService
)
from .table_view import Column, Derived, FieldKey


@dataclass(frozen=True)
class EntityDefinition:
    """Everything the REST layer, forms and exports need to know about one entity"""
    name: str  # URL segment, e.g. "groups"
    title: str  # display name, also the export filename
    singular: str
    form: Type[BaseModel]
    service: Type[RecordService]
    columns: List[Column]
    to_form_values: Callable[[Mapping[str, Any]], Dict[str, str]]


def format_speciality_code(code) -> str:
    return "" if code is None else f"{int(code):03d}"


def full_name(person) -> str:
    """'Last First' for a joined person, empty when the relation is missing"""
    if not person:
        return ""
    return f"{person.get('last_name') or ''} {person.get('first_name') or ''}".strip()


def related(field: str, key: str) -> Callable[[Mapping[str, Any]], Any]:
    def accessor(record):
        relation = record.get(field)
        return relation.get(key) if relation else None
    return accessor


def format_date(value) -> str:
    return value.strftime("%Y-%m-%d") if value else ""


def _text(value) -> str:
    return "" if value is None else str(value)


def group_form_values(group) -> Dict[str, str]:
    return {
        "speciality_code": format_speciality_code(group["speciality_code"]),
        "speciality_name": group["speciality_name"],
    }


def teacher_form_values(teacher) -> Dict[str, str]:
    return {"first_name": teacher["first_name"], "last_name": teacher["last_name"]}


def subject_form_values(subject) -> Dict[str, str]:
    return {"name": subject["name"]}


def student_form_values(student) -> Dict[str, str]:
    return {
        "first_name": student["first_name"],
        "last_name": student["last_name"],
        "group_id": _text(student["group_id"]),
    }


def grade_form_values(grade) -> Dict[str, str]:
    return {
        "student_id": _text(grade["student_id"]),
        "teacher_id": _text(grade["teacher_id"]),
        "subject_id": _text(grade["subject_id"]),
        "grade": _text(grade["grade"]),
        "note": grade.get("note") or "",
    }


GROUPS = EntityDefinition(
    name="groups",
    title="Groups",
    singular="group",
    form=GroupForm,
    service=GroupService,
    columns=[
        Column("Speciality Code", Derived(lambda group: format_speciality_code(group.get("speciality_code")))),
        Column("Speciality Name", FieldKey("speciality_name")),
    ],
    to_form_values=group_form_values,
)

STUDENTS = EntityDefinition(
    name="students",
    title="Students",
    singular="student",
    form=StudentForm,
    service=StudentService,
    columns=[
        Column("Last Name", FieldKey("last_name")),
        Column("First Name", FieldKey("first_name")),
        Column("Group", Derived(related("group", "speciality_name"))),
    ],
    to_form_values=student_form_values,
)

TEACHERS = EntityDefinition(
    name="teachers",
    title="Teachers",
    singular="teacher",
    form=TeacherForm,
    service=TeacherService,
    columns=[
        Column("Last Name", FieldKey("last_name")),
        Column("First Name", FieldKey("first_name")),
    ],
    to_form_values=teacher_form_values,
)

SUBJECTS = EntityDefinition(
    name="subjects",
    title="Subjects",
    singular="subject",
    form=SubjectForm,
    service=SubjectService,
    columns=[
        Column("Subject Name", FieldKey("name")),
    ],
    to_form_values=subject_form_values,
)

GRADES = EntityDefinition(
    name="grades",
    title="Grades",
    singular="grade",
    form=GradeForm,
    service=GradeService,
    columns=[
        Column("Student", Derived(lambda grade: full_name(grade.get("student")))),
        Column("Teacher", Derived(lambda grade: full_name(grade.get("teacher")))),
        Column("Subject", Derived(related("subject", "name"))),
        Column("Grade", FieldKey("grade")),
        Column("Note", FieldKey("note")),
        Column("Date", Derived(lambda grade: format_date(grade.get("created_at")))),
    ],
    to_form_values=grade_form_values,
)

# Navigation order of the sections
ENTITIES: Dict[str, EntityDefinition] = {
    entity.name: entity for entity in (GROUPS, STUDENTS, TEACHERS, SUBJECTS, GRADES)
}
