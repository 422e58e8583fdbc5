# tests/conftest.py
"""
Shared fixtures: an in-memory SQLite database, a session on it, and a
TestClient whose get_db dependency hands out that same session.
"""
import os

# Must be set before app.core.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_db
from app.core.database import Base, SessionLocal, engine
from app.main import app
from app.models.student import Gender, Student


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def _override_get_db():
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def add_student(db):
    """Insert a student directly, bypassing the service checks."""
    def _add(name, email, gender=Gender.FEMALE, **extra):
        student = Student(name=name, email=email, gender=gender, **extra)
        db.add(student)
        db.commit()
        db.refresh(student)
        return student
    return _add


@pytest.fixture
def three_students(add_student):
    return [
        add_student("Alice", "alice@gmail.com", Gender.FEMALE, nationality="USA", college="MIT",
                    major="Computer Science"),
        add_student("Bob", "bob@gmail.com", Gender.MALE, nationality="Canada", college="UBC",
                    major="Engineering"),
        add_student("Carol", "carol@outlook.com", Gender.FEMALE, nationality="UK", college="Oxford",
                    major="Mathematics"),
    ]
