import random

from sqlalchemy import text

from app.models.student import Gender, Student
from seed import next_seed_number, seed_data


def test_equal_by_id_when_both_persisted():
    a = Student(id=1, name="Alice", email="a@gmail.com", gender=Gender.FEMALE)
    b = Student(id=1, name="Renamed", email="other@gmail.com", gender=Gender.MALE)
    c = Student(id=2, name="Alice", email="a@gmail.com", gender=Gender.FEMALE)

    assert a == b
    assert a != c
    assert hash(a) == hash(b)


def test_structural_equality_without_id():
    a = Student(name="Alice", email="a@gmail.com", gender=Gender.FEMALE, college="MIT")
    b = Student(name="Alice", email="a@gmail.com", gender=Gender.FEMALE, college="UBC")
    c = Student(name="Alice", email="a@gmail.com", gender=Gender.OTHER)

    assert a == b
    assert a != c
    assert hash(a) == hash(b)


def test_gender_is_stored_by_name(db, add_student):
    add_student("Alice", "alice@gmail.com", Gender.OTHER)

    stored = db.execute(text("SELECT gender FROM student")).scalar_one()

    assert stored == "OTHER"


def test_seed_tops_up_to_target(db, add_student):
    add_student("Existing", "existing@gmail.com")

    inserted = seed_data(db, target=25, rnd=random.Random(7))

    assert inserted == 24
    assert db.query(Student).count() == 25
    emails = [email for (email,) in db.query(Student.email)]
    assert len(set(emails)) == 25


def test_seed_is_idempotent(db):
    seed_data(db, target=10, rnd=random.Random(1))

    assert seed_data(db, target=10) == 0
    assert db.query(Student).count() == 10


def test_reseed_after_delete_never_reuses_emails(db):
    seed_data(db, target=10, rnd=random.Random(3))
    middle = db.query(Student).filter(Student.email.like("student5@%")).one()
    db.delete(middle)
    db.commit()

    assert seed_data(db, target=10, rnd=random.Random(3)) == 1

    emails = [email for (email,) in db.query(Student.email)]
    assert len(emails) == len(set(emails)) == 10
    assert any(email.startswith("student11@") for email in emails)


def test_next_seed_number_skips_used_numbers(db, add_student):
    assert next_seed_number(db) == 1

    add_student("Manual", "Student50@gmail.com")
    assert next_seed_number(db) == 2

    add_student("Seeded", "student50@gmail.com")
    assert next_seed_number(db) == 51
