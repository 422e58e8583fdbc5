"""
Search, filter and pagination for students.

Request parameters are normalised by small pure functions and then turned
into a parameterised SQLAlchemy query. The paged and the unpaged (export)
variants share the same predicate and ordering.
"""
import logging
from dataclasses import dataclass
from typing import List, NamedTuple, Optional

from sqlalchemy import false, func
from sqlalchemy.orm import Query, Session

from app.core.exceptions import QueryError
from app.models.student import Gender, Student

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = {
    "id": Student.id,
    "name": Student.name,
    "email": Student.email,
    "gender": Student.gender,
    "nationality": Student.nationality,
    "college": Student.college,
    "major": Student.major,
    "minor": Student.minor,
}

LIKE_ESCAPE = "\\"


@dataclass(frozen=True)
class StudentQuery:
    page: int = 0
    size: int = 50
    sort_by: str = "id"
    direction: str = "asc"
    gender: Optional[Gender] = None
    domain: Optional[str] = None


class PageResult(NamedTuple):
    items: List[Student]
    total: int
    page: int
    size: int


def is_descending(direction: Optional[str]) -> bool:
    """Only "desc" (any case) sorts descending; everything else is ascending."""
    return direction is not None and direction.lower() == "desc"


def normalize_domain(domain: Optional[str]) -> Optional[str]:
    """Blank or whitespace-only domain filters count as no filter."""
    if domain is None or not domain.strip():
        return None
    return domain.strip()


def resolve_sort_column(sort_by: str):
    try:
        return SORTABLE_FIELDS[sort_by]
    except KeyError:
        raise QueryError(
            f"Unknown sort field '{sort_by}'",
            details=[f"sortBy: must be one of {', '.join(SORTABLE_FIELDS)}"],
        )


def escape_like(value: str) -> str:
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def domain_clause(domain: str):
    """
    Match emails whose part after the last '@' equals domain, ignoring case.

    "ends with '@' + domain" is the same test as long as domain itself has
    no '@'; a domain that does can never be the part after the last '@'.
    """
    if "@" in domain:
        return false()
    pattern = "%@" + escape_like(domain.lower())
    return func.lower(Student.email).like(pattern, escape=LIKE_ESCAPE)


def apply_filters(query: Query, gender: Optional[Gender], domain: Optional[str]) -> Query:
    if gender is not None:
        query = query.filter(Student.gender == gender)
    domain = normalize_domain(domain)
    if domain is not None:
        query = query.filter(domain_clause(domain))
    return query


def apply_sort(query: Query, sort_by: str, direction: Optional[str]) -> Query:
    column = resolve_sort_column(sort_by)
    descending = is_descending(direction)
    order = [column.desc() if descending else column.asc()]
    # Tie-breaker so rows never move between pages
    if column is not Student.id:
        order.append(Student.id.desc() if descending else Student.id.asc())
    return query.order_by(*order)


def fetch_page(db: Session, params: StudentQuery) -> PageResult:
    query = apply_filters(db.query(Student), params.gender, params.domain)
    ordered = apply_sort(query, params.sort_by, params.direction)

    total = query.count()
    offset = params.page * params.size
    # Past the last row: nothing to fetch, and huge offsets overflow the driver
    if offset >= total:
        items = []
    else:
        items = ordered.offset(offset).limit(params.size).all()

    logger.debug(
        f"Student page {params.page} (size={params.size}, sort={params.sort_by} {params.direction}): "
        f"{len(items)} of {total}"
    )
    return PageResult(items=items, total=total, page=params.page, size=params.size)


def fetch_all(db: Session, params: StudentQuery) -> List[Student]:
    query = apply_filters(db.query(Student), params.gender, params.domain)
    return apply_sort(query, params.sort_by, params.direction).all()
