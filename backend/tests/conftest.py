"""
University Journal - Test Configuration and Fixtures
"""
import os
from typing import Generator

import pytest
from faker import Faker
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# Point the application engine at a throwaway database before app imports
os.environ['DATABASE_URL'] = 'sqlite://'
os.environ['LOG_LEVEL'] = 'DEBUG'

from app.main import app
from app.database.base import Base
from app.database.session import get_db
from app.schemas.records import GroupForm, StudentForm, TeacherForm, SubjectForm, GradeForm
from app.services.records_service import (
    GroupService, StudentService, TeacherService, SubjectService, GradeService
)

fake = Faker()


def _memory_engine():
    return create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )


@pytest.fixture(scope='function')
def db_session() -> Generator[Session, None, None]:
    """Fresh in-memory database with all tables for each test"""
    engine = _memory_engine()
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(scope='function')
def broken_session() -> Generator[Session, None, None]:
    """Session on a database without tables: every statement fails"""
    engine = _memory_engine()
    session = sessionmaker(bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


def _client_for(session: Session) -> Generator[TestClient, None, None]:
    def override_get_db():
        yield session

    app.dependency_overrides[get_db] = override_get_db
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """Test client with the database dependency overridden"""
    yield from _client_for(db_session)


@pytest.fixture
def broken_client(broken_session: Session) -> Generator[TestClient, None, None]:
    yield from _client_for(broken_session)


@pytest.fixture
def group(db_session: Session) -> dict:
    """A stored group, as returned by the list call"""
    created = GroupService.create(
        db_session, GroupForm(speciality_code=121, speciality_name='Software Engineering')
    )
    return next(g for g in GroupService.list(db_session) if g['id'] == created['id'])


@pytest.fixture
def teacher(db_session: Session) -> dict:
    created = TeacherService.create(
        db_session, TeacherForm(first_name=fake.first_name(), last_name=fake.last_name())
    )
    return next(t for t in TeacherService.list(db_session) if t['id'] == created['id'])


@pytest.fixture
def subject(db_session: Session) -> dict:
    created = SubjectService.create(db_session, SubjectForm(name='Databases'))
    return next(s for s in SubjectService.list(db_session) if s['id'] == created['id'])


@pytest.fixture
def student(db_session: Session, group: dict) -> dict:
    created = StudentService.create(
        db_session, StudentForm(first_name='Taras', last_name='Shevchenko', group_id=group['id'])
    )
    return next(s for s in StudentService.list(db_session) if s['id'] == created['id'])


@pytest.fixture
def grade(db_session: Session, student: dict, teacher: dict, subject: dict) -> dict:
    created = GradeService.create(
        db_session,
        GradeForm(
            student_id=student['id'],
            teacher_id=teacher['id'],
            subject_id=subject['id'],
            grade=95,
            note='Excellent',
        ),
    )
    return next(g for g in GradeService.list(db_session) if g['id'] == created['id'])
