import pytest

from app.core.exceptions import DuplicateEmailError, StudentNotFoundError
from app.models.student import Gender, Student
from app.schemas.student import StudentCreate, StudentUpdate
from app.services.student import student as crud_student


def _create(db, name, email, gender=Gender.MALE, **extra):
    payload = StudentCreate(name=name, email=email, gender=gender, **extra)
    return crud_student.create_student(db, payload)


def test_create_assigns_id_and_persists(db):
    created = _create(db, "Alice", "alice@gmail.com", Gender.FEMALE, nationality="USA")

    assert created.id is not None
    fetched = crud_student.get_student(db, created.id)
    assert fetched.email == "alice@gmail.com"
    assert fetched.gender == Gender.FEMALE
    assert fetched.nationality == "USA"


def test_distinct_creates_are_all_retrievable(db):
    emails = ["a@gmail.com", "b@gmail.com", "c@outlook.com"]
    for i, email in enumerate(emails):
        _create(db, f"Student {i}", email)

    stored = [s.email for s in crud_student.get_students(db)]
    assert stored == emails


def test_duplicate_email_on_create(db):
    _create(db, "Alice", "alice@gmail.com")

    with pytest.raises(DuplicateEmailError):
        _create(db, "Another Alice", "alice@gmail.com")

    assert db.query(Student).filter(Student.email == "alice@gmail.com").count() == 1


def test_unique_constraint_is_authoritative(db, monkeypatch):
    _create(db, "Alice", "alice@gmail.com")
    # Simulate a concurrent writer slipping past the pre-check
    monkeypatch.setattr(crud_student, "email_exists", lambda *args, **kwargs: False)

    with pytest.raises(DuplicateEmailError):
        _create(db, "Racer", "alice@gmail.com")

    assert db.query(Student).count() == 1


def test_get_students_is_sorted_by_id(db, add_student):
    first = add_student("Zed", "zed@gmail.com")
    second = add_student("Amy", "amy@gmail.com")

    assert [s.id for s in crud_student.get_students(db)] == [first.id, second.id]


def test_update_missing_student(db):
    with pytest.raises(StudentNotFoundError):
        crud_student.update_student(db, 999, StudentUpdate(name="Ghost"))


def test_update_email_to_another_students_email(db):
    alice = _create(db, "Alice", "alice@gmail.com")
    _create(db, "Bob", "bob@gmail.com")

    with pytest.raises(DuplicateEmailError):
        crud_student.update_student(db, alice.id, StudentUpdate(email="bob@gmail.com"))

    assert crud_student.get_student(db, alice.id).email == "alice@gmail.com"


def test_update_email_to_own_email_succeeds(db):
    alice = _create(db, "Alice", "alice@gmail.com")

    updated = crud_student.update_student(
        db, alice.id, StudentUpdate(name="Alice B", email="alice@gmail.com")
    )

    assert updated.name == "Alice B"
    assert updated.email == "alice@gmail.com"


def test_partial_update_only_touches_supplied_fields(db):
    alice = _create(db, "Alice", "alice@gmail.com", Gender.FEMALE, nationality="USA", college="MIT")

    updated = crud_student.update_student(
        db, alice.id, StudentUpdate(college="Stanford", nationality=None)
    )

    assert updated.id == alice.id
    assert updated.name == "Alice"
    assert updated.gender == Gender.FEMALE
    assert updated.college == "Stanford"
    # Explicit null leaves the stored value alone
    assert updated.nationality == "USA"


def test_update_changes_email(db):
    alice = _create(db, "Alice", "alice@gmail.com")

    updated = crud_student.update_student(db, alice.id, StudentUpdate(email="alice@outlook.com"))

    assert updated.email == "alice@outlook.com"


def test_delete_missing_student_leaves_store_unchanged(db):
    _create(db, "Alice", "alice@gmail.com")

    with pytest.raises(StudentNotFoundError):
        crud_student.delete_student(db, 12345)

    assert db.query(Student).count() == 1


def test_delete_removes_student(db):
    alice = _create(db, "Alice", "alice@gmail.com")

    crud_student.delete_student(db, alice.id)

    assert crud_student.get_student(db, alice.id) is None


def test_page_metadata(db, three_students):
    page = crud_student.get_students_page(db, page=0, size=2, sort_by="id", direction="asc")

    assert page.total_elements == 3
    assert page.total_pages == 2
    assert page.number_of_elements == 2
    assert page.first and not page.last and not page.empty


def test_page_past_the_end(db, three_students):
    page = crud_student.get_students_page(db, page=999, size=50, sort_by="id", direction="asc")

    assert page.content == []
    assert page.total_elements == 3
    assert page.empty and page.last and not page.first
