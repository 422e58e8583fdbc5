from dataclasses import replace
from typing import Generator, Optional

from fastapi import Depends, Query

from app.core.config import settings
from app.core.database import SessionLocal
from app.models.student import Gender
from app.services.student.query import StudentQuery


def get_db() -> Generator:
    """
    Dependency that provides a database session.
    The session is closed once the request has finished.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def sort_params(
    sort_by: str = Query("id", alias="sortBy", description="Field to sort by"),
    direction: str = Query("asc", description="'desc' for descending, anything else ascending"),
) -> StudentQuery:
    return StudentQuery(sort_by=sort_by, direction=direction)


def paging_params(
    sort: StudentQuery = Depends(sort_params),
    page: int = Query(0, ge=0, description="Zero-based page index"),
    size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE, description="Page size"),
) -> StudentQuery:
    return replace(sort, page=page, size=size)


def _with_filters(base: StudentQuery, gender: Optional[Gender], domain: Optional[str]) -> StudentQuery:
    return replace(base, gender=gender, domain=domain)


def search_params(
    paging: StudentQuery = Depends(paging_params),
    gender: Optional[Gender] = Query(None, description="MALE, FEMALE or OTHER"),
    domain: Optional[str] = Query(None, description="Email domain, e.g. gmail.com"),
) -> StudentQuery:
    return _with_filters(paging, gender, domain)


def export_params(
    sort: StudentQuery = Depends(sort_params),
    gender: Optional[Gender] = Query(None, description="MALE, FEMALE or OTHER"),
    domain: Optional[str] = Query(None, description="Email domain, e.g. gmail.com"),
) -> StudentQuery:
    return _with_filters(sort, gender, domain)
