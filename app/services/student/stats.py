from collections import Counter
from typing import Dict, List, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.student import Gender, Student

GENDER_LABELS = {
    Gender.MALE: "Male",
    Gender.FEMALE: "Female",
    Gender.OTHER: "Other",
}


def _ordered(counts) -> List[Tuple[str, int]]:
    """Count descending, then key ascending so equal counts stay deterministic."""
    return sorted(counts, key=lambda kv: (-kv[1], kv[0]))


def count_by_gender(db: Session) -> Dict[str, int]:
    """Always returns Male, Female and Other, zero when no rows exist."""
    result = {label: 0 for label in GENDER_LABELS.values()}
    rows = db.query(Student.gender, func.count(Student.id)).group_by(Student.gender).all()
    for gender, count in rows:
        if gender is None:
            continue
        result[GENDER_LABELS[gender]] = count
    return result


def email_domain(email: str) -> str:
    return email.rsplit("@", 1)[1].lower()


def count_by_domain(db: Session) -> List[Tuple[str, int]]:
    """
    Group by the lower-cased part after the last '@'.
    Emails without '@' are left out.
    """
    emails = (
        db.query(Student.email)
        .filter(Student.email.isnot(None), Student.email.contains("@"))
        .yield_per(1000)
    )
    counts = Counter(email_domain(email) for (email,) in emails)
    return _ordered(counts.items())


def _count_by_column(db: Session, column) -> List[Tuple[str, int]]:
    rows = (
        db.query(column, func.count(Student.id))
        .filter(column.isnot(None))
        .group_by(column)
        .all()
    )
    return _ordered((value, count) for value, count in rows)


def count_by_nationality(db: Session) -> List[Tuple[str, int]]:
    return _count_by_column(db, Student.nationality)


def count_by_college(db: Session) -> List[Tuple[str, int]]:
    return _count_by_column(db, Student.college)
