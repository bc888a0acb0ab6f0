# app/services/records_service.py
from sqlalchemy import desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from pydantic import BaseModel
from typing import Dict, List, Optional
import logging

from ..database.models import Group, Student, Teacher, Subject, Grade
from ..exceptions import PersistenceError

logger = logging.getLogger(__name__)


def to_dict(row) -> Optional[Dict]:
    """Plain column dict for a model instance; None passes through (left-join miss)"""
    if row is None:
        return None
    return {column.name: getattr(row, column.name) for column in row.__table__.columns}


class RecordService:
    """
    Single-record CRUD for one entity table.

    Every write is one statement followed by a commit. There is no version
    check, so concurrent writers to the same row overwrite each other.
    Rows that tie on the ordering column come back in storage order.
    """

    model = None
    order_by = None

    @classmethod
    def _fail(cls, db: Session, action: str, error: Exception) -> PersistenceError:
        db.rollback()
        logger.error(f"Failed to {action} {cls.model.__tablename__}: {error}")
        return PersistenceError(f"Failed to {action} {cls.model.__tablename__}")

    @classmethod
    def _query_rows(cls, db: Session) -> List[Dict]:
        return [to_dict(row) for row in db.query(cls.model).order_by(cls.order_by).all()]

    @classmethod
    def list(cls, db: Session) -> List[Dict]:
        try:
            return cls._query_rows(db)
        except SQLAlchemyError as e:
            raise cls._fail(db, "fetch", e) from e

    @classmethod
    def create(cls, db: Session, record: BaseModel) -> Dict:
        try:
            row = cls.model(**record.model_dump())
            db.add(row)
            db.commit()
            db.refresh(row)
        except SQLAlchemyError as e:
            raise cls._fail(db, "create", e) from e

        logger.info(f"Created {cls.model.__tablename__} id={row.id}")
        return {"id": row.id}

    @classmethod
    def update(cls, db: Session, record_id: int, record: BaseModel) -> int:
        """Full-record update. Returns the number of rows touched (0 when the id is gone)."""
        try:
            touched = db.query(cls.model).filter(cls.model.id == record_id).update(
                record.model_dump(), synchronize_session="fetch"
            )
            db.commit()
        except SQLAlchemyError as e:
            raise cls._fail(db, "update", e) from e

        if touched:
            logger.info(f"Updated {cls.model.__tablename__} id={record_id}")
        else:
            logger.warning(f"Update of {cls.model.__tablename__} id={record_id} matched no rows")
        return touched

    @classmethod
    def delete(cls, db: Session, record_id: int) -> int:
        """Immediate, irreversible delete. Returns the number of rows removed."""
        try:
            removed = db.query(cls.model).filter(cls.model.id == record_id).delete(
                synchronize_session="fetch"
            )
            db.commit()
        except SQLAlchemyError as e:
            raise cls._fail(db, "delete", e) from e

        if removed:
            logger.info(f"Deleted {cls.model.__tablename__} id={record_id}")
        else:
            logger.warning(f"Delete of {cls.model.__tablename__} id={record_id} matched no rows")
        return removed


class GroupService(RecordService):
    model = Group
    order_by = Group.speciality_name


class TeacherService(RecordService):
    model = Teacher
    order_by = Teacher.last_name


class SubjectService(RecordService):
    model = Subject
    order_by = Subject.name


class StudentService(RecordService):
    model = Student
    order_by = Student.last_name

    @classmethod
    def _query_rows(cls, db: Session) -> List[Dict]:
        rows = (
            db.query(Student, Group)
            .outerjoin(Group, Student.group_id == Group.id)
            .order_by(Student.last_name)
            .all()
        )

        students = []
        for student, group in rows:
            record = to_dict(student)
            record["group"] = to_dict(group)
            students.append(record)
        return students


class GradeService(RecordService):
    model = Grade
    order_by = desc(Grade.created_at)

    @classmethod
    def _query_rows(cls, db: Session) -> List[Dict]:
        rows = (
            db.query(Grade, Student, Teacher, Subject)
            .outerjoin(Student, Grade.student_id == Student.id)
            .outerjoin(Teacher, Grade.teacher_id == Teacher.id)
            .outerjoin(Subject, Grade.subject_id == Subject.id)
            .order_by(desc(Grade.created_at))
            .all()
        )

        grades = []
        for grade, student, teacher, subject in rows:
            record = to_dict(grade)
            record["student"] = to_dict(student)
            record["teacher"] = to_dict(teacher)
            record["subject"] = to_dict(subject)
            grades.append(record)
        return grades
