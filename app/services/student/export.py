from datetime import date
from typing import Iterable, Optional

from app.models.student import Student

CSV_COLUMNS = ("id", "name", "email", "gender", "nationality", "college", "major", "minor")
CSV_MEDIA_TYPE = "text/csv"

_NEEDS_QUOTING = ('"', ",", "\n", "\r")


def csv_field(value) -> str:
    """
    Render one CSV cell.

    The value is quoted, with inner quotes doubled, only when it contains a
    quote, comma, newline or carriage return. None becomes an empty cell.
    """
    if value is None:
        return ""
    text = str(value)
    if any(ch in text for ch in _NEEDS_QUOTING):
        return '"' + text.replace('"', '""') + '"'
    return text


def student_row(student: Student) -> str:
    gender = student.gender.name if student.gender is not None else ""
    values = (
        student.id,
        student.name,
        student.email,
        gender,
        student.nationality,
        student.college,
        student.major,
        student.minor,
    )
    return ",".join(csv_field(v) for v in values)


def render_csv(students: Iterable[Student]) -> str:
    lines = [",".join(CSV_COLUMNS)]
    lines.extend(student_row(s) for s in students)
    return "\n".join(lines) + "\n"


def export_filename(today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"students-export-{today.isoformat()}.csv"


def content_disposition(filename: str) -> str:
    return f'attachment; filename="{filename}"'
