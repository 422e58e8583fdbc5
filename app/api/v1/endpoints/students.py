from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from typing import Dict, List
from app.api.deps import export_params, get_db, paging_params, search_params
from app.services.student import student as crud_student
from app.services.student import export as csv_export
from app.services.student.query import StudentQuery
from app.schemas.student import CountItem, Student, StudentCreate, StudentPage, StudentUpdate

router = APIRouter()


@router.get("", response_model=List[Student])
def get_students(db: Session = Depends(get_db)):
    """
    List every student, sorted by id ascending
    """
    return crud_student.get_students(db)


@router.get("/page", response_model=StudentPage)
def get_students_page(
    params: StudentQuery = Depends(paging_params),
    db: Session = Depends(get_db)
):
    """
    Paged list of students

    - **page**: zero-based page index (default: 0)
    - **size**: page size (default: 50)
    - **sortBy**: field to sort by (default: id)
    - **direction**: `desc` for descending, anything else ascending
    """
    return crud_student.get_students_page(
        db, page=params.page, size=params.size, sort_by=params.sort_by, direction=params.direction
    )


@router.get("/search", response_model=StudentPage)
def search_students(
    params: StudentQuery = Depends(search_params),
    db: Session = Depends(get_db)
):
    """
    Paged list filtered by gender and/or email domain

    - **gender**: MALE, FEMALE or OTHER
    - **domain**: email domain, matched case-insensitively (blank means no filter)
    """
    return crud_student.search_students(db, params)


@router.get("/export", response_class=Response)
def export_students_csv(
    params: StudentQuery = Depends(export_params),
    db: Session = Depends(get_db)
):
    """
    Download every matching student as CSV
    """
    students = crud_student.search_students_all(db, params)
    filename = csv_export.export_filename()
    return Response(
        content=csv_export.render_csv(students),
        media_type=csv_export.CSV_MEDIA_TYPE,
        headers={"Content-Disposition": csv_export.content_disposition(filename)},
    )


@router.get("/stats/gender", response_model=Dict[str, int])
def get_gender_stats(db: Session = Depends(get_db)):
    """
    Student count per gender; Male, Female and Other are always present
    """
    return crud_student.get_gender_stats(db)


@router.get("/stats/domains", response_model=List[CountItem])
def get_domain_stats(db: Session = Depends(get_db)):
    return crud_student.get_domain_stats(db)


@router.get("/stats/nationality", response_model=List[CountItem])
def get_nationality_stats(db: Session = Depends(get_db)):
    return crud_student.get_nationality_stats(db)


@router.get("/stats/college", response_model=List[CountItem])
def get_college_stats(db: Session = Depends(get_db)):
    return crud_student.get_college_stats(db)


@router.get("/{student_id}", response_model=Student)
def get_student(
    student_id: int,
    db: Session = Depends(get_db)
):
    """
    Fetch one student by id
    """
    return crud_student.get_student_or_404(db, student_id)


@router.post("", response_model=Student, status_code=status.HTTP_201_CREATED)
def create_student(
    student: StudentCreate,
    db: Session = Depends(get_db)
):
    """
    Create a new student

    - **name**: required, not blank
    - **email**: required, must be unique
    - **gender**: required, MALE, FEMALE or OTHER
    - **nationality**, **college**, **major**, **minor**: optional
    """
    return crud_student.create_student(db=db, student=student)


@router.put("/{student_id}", response_model=Student)
def update_student(
    student_id: int,
    student: StudentUpdate,
    db: Session = Depends(get_db)
):
    """
    Partial update: only the fields sent with a non-null value change
    """
    return crud_student.update_student(db=db, student_id=student_id, student=student)


@router.delete("/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_student(
    student_id: int,
    db: Session = Depends(get_db)
):
    """
    Delete a student
    """
    crud_student.delete_student(db=db, student_id=student_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
