import logging
import random
import re

from sqlalchemy import func

from app.core.config import settings
from app.core.database import SessionLocal, create_database_tables
from app.models.student import Gender, Student

# Setup logging to see output
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

FIRST_NAMES = ["Alex", "Jamie", "Taylor", "Jordan", "Casey", "Riley", "Morgan", "Avery",
               "Quinn", "Hayden", "Evan", "Kai", "Logan", "Peyton", "Sawyer"]
LAST_NAMES = ["Smith", "Johnson", "Williams", "Brown", "Jones", "Miller", "Davis", "Garcia",
              "Rodriguez", "Martinez", "Hernandez", "Lopez", "Gonzalez", "Wilson", "Anderson"]
DOMAINS = ["gmail.com", "hotmail.com", "yahoo.com", "outlook.com", "edu.example", "example.org"]
NATIONALITIES = ["USA", "Canada", "UK", "Brazil", "Germany", "France", "Japan", "Australia"]
COLLEGES = ["Engineering", "Business", "Arts", "Science", "Liberal Arts", "General Studies",
            "Mathematics", "Medicine"]
MAJORS = ["Computer Science", "Economics", "Biology", "Mathematics", "History", "Physics",
          "Chemistry", "Philosophy"]
MINORS = ["Statistics", "Music", "Spanish", "Art", "Psychology", "Sociology", "French", "German"]

CHUNK_SIZE = 500

SEED_EMAIL = re.compile(r"^student(\d+)@")


def random_students(count: int, start: int, rnd: random.Random):
    """Build count random students with emails numbered from start."""
    for i in range(count):
        yield Student(
            name=f"{rnd.choice(FIRST_NAMES)} {rnd.choice(LAST_NAMES)}",
            email=f"student{start + i}@{rnd.choice(DOMAINS)}",
            gender=rnd.choice(list(Gender)),
            nationality=rnd.choice(NATIONALITIES),
            college=rnd.choice(COLLEGES),
            major=rnd.choice(MAJORS),
            minor=rnd.choice(MINORS),
        )


def next_seed_number(db) -> int:
    """
    First free N for studentN@ emails: past both the highest id and the
    highest number already used, so deleted rows never lead to reuse.
    """
    highest = db.query(func.max(Student.id)).scalar() or 0
    seeded = db.query(Student.email).filter(Student.email.like("student%@%"))
    for (email,) in seeded:
        match = SEED_EMAIL.match(email)
        if match:
            highest = max(highest, int(match.group(1)))
    return highest + 1


def seed_data(db, target: int = settings.SEED_TARGET_COUNT, rnd: random.Random = None) -> int:
    """
    Top the student table up to target rows.
    Returns the number of rows inserted.
    """
    rnd = rnd or random.Random()
    existing = db.query(Student).count()
    if existing >= target:
        logger.info(f"Database already holds {existing} students. Skipping seed.")
        return 0

    to_create = target - existing
    logger.info(f"Seeding {to_create} students...")

    batch = list(random_students(to_create, next_seed_number(db), rnd))
    try:
        for start in range(0, len(batch), CHUNK_SIZE):
            db.add_all(batch[start:start + CHUNK_SIZE])
            db.flush()
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"✅ Seeded {to_create} students")
    return to_create


if __name__ == "__main__":
    create_database_tables()
    session = SessionLocal()
    try:
        seed_data(session)
    except Exception as e:
        logger.error(f"❌ Error seeding data: {e}")
        raise
    finally:
        session.close()
