import logging
import math
from typing import Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import DuplicateEmailError, StudentNotFoundError
from app.models.student import Student
from app.schemas.student import CountItem, StudentCreate, StudentPage, StudentUpdate
from app.schemas.student import Student as StudentSchema
from app.services.student import stats
from app.services.student.query import PageResult, StudentQuery, fetch_all, fetch_page

logger = logging.getLogger(__name__)


# =============================================================================
# READ
# =============================================================================

def get_student(db: Session, student_id: int) -> Optional[Student]:
    """Fetch one student by id, or None"""
    return db.query(Student).filter(Student.id == student_id).first()


def get_student_or_404(db: Session, student_id: int) -> Student:
    student = get_student(db, student_id)
    if student is None:
        raise StudentNotFoundError(student_id)
    return student


def email_exists(db: Session, email: str, exclude_id: Optional[int] = None) -> bool:
    """Exact-match email check, optionally ignoring one student id"""
    query = db.query(Student.id).filter(Student.email == email)
    if exclude_id is not None:
        query = query.filter(Student.id != exclude_id)
    return db.query(query.exists()).scalar()


def get_students(db: Session) -> List[Student]:
    """All students ordered by id"""
    return db.query(Student).order_by(Student.id.asc()).all()


def to_page(result: PageResult) -> StudentPage:
    total_pages = math.ceil(result.total / result.size) if result.size else 0
    content = [StudentSchema.model_validate(s) for s in result.items]
    return StudentPage(
        content=content,
        total_elements=result.total,
        total_pages=total_pages,
        number=result.page,
        size=result.size,
        number_of_elements=len(content),
        first=result.page == 0,
        last=result.page + 1 >= total_pages,
        empty=not content,
    )


def get_students_page(db: Session, page: int, size: int, sort_by: str, direction: str) -> StudentPage:
    params = StudentQuery(page=page, size=size, sort_by=sort_by, direction=direction)
    return to_page(fetch_page(db, params))


def search_students(db: Session, params: StudentQuery) -> StudentPage:
    return to_page(fetch_page(db, params))


def search_students_all(db: Session, params: StudentQuery) -> List[Student]:
    """Same filters and ordering as search_students, without the page bound"""
    return fetch_all(db, params)


# =============================================================================
# WRITE
# =============================================================================

def _commit(db: Session, email: str) -> None:
    """
    Commit, turning a unique-constraint violation into DuplicateEmailError.
    The pre-checks are advisory; the constraint is what holds under
    concurrent writers.
    """
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning(f"Unique constraint rejected email {email}")
        raise DuplicateEmailError(email)


def create_student(db: Session, student: StudentCreate) -> Student:
    """Create a new student; email must not be used yet"""
    if email_exists(db, student.email):
        logger.warning(f"Create rejected, email already used: {student.email}")
        raise DuplicateEmailError(student.email)

    db_student = Student(**student.model_dump())
    db.add(db_student)
    _commit(db, student.email)
    db.refresh(db_student)
    logger.info(f"Created student {db_student.id}")
    return db_student


def update_student(db: Session, student_id: int, student: StudentUpdate) -> Student:
    """Apply a partial update; only supplied, non-null fields change"""
    db_student = get_student_or_404(db, student_id)
    changes = student.changes()

    new_email = changes.get("email")
    if new_email is not None and new_email != db_student.email:
        if email_exists(db, new_email, exclude_id=student_id):
            logger.warning(f"Update of {student_id} rejected, email already used: {new_email}")
            raise DuplicateEmailError(new_email)

    for field, value in changes.items():
        setattr(db_student, field, value)

    _commit(db, db_student.email)
    db.refresh(db_student)
    logger.info(f"Updated student {student_id}: {sorted(changes)}")
    return db_student


def delete_student(db: Session, student_id: int) -> None:
    """Physically delete a student"""
    db_student = get_student_or_404(db, student_id)
    db.delete(db_student)
    db.commit()
    logger.info(f"Deleted student {student_id}")


# =============================================================================
# STATS
# =============================================================================

def get_gender_stats(db: Session) -> Dict[str, int]:
    return stats.count_by_gender(db)


def get_domain_stats(db: Session) -> List[CountItem]:
    return [CountItem(key=k, count=c) for k, c in stats.count_by_domain(db)]


def get_nationality_stats(db: Session) -> List[CountItem]:
    return [CountItem(key=k, count=c) for k, c in stats.count_by_nationality(db)]


def get_college_stats(db: Session) -> List[CountItem]:
    return [CountItem(key=k, count=c) for k, c in stats.count_by_college(db)]
