from typing import Annotated, List, Optional

from email_validator import validate_email
from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from app.models.student import Gender


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value


def _valid_email(value: str) -> str:
    # Shape check only; the address is stored exactly as sent
    validate_email(value, check_deliverability=False)
    return value


NameStr = Annotated[str, AfterValidator(_not_blank)]
EmailText = Annotated[str, AfterValidator(_valid_email)]


class StudentBase(BaseModel):
    name: NameStr
    email: EmailText
    gender: Gender
    nationality: Optional[str] = None
    college: Optional[str] = None
    major: Optional[str] = None
    minor: Optional[str] = None


class StudentCreate(StudentBase):
    pass


class StudentUpdate(BaseModel):
    """
    Partial update payload.

    Omitted fields and explicit nulls both leave the stored value untouched,
    so a field can be changed but never cleared through an update.
    """
    name: Optional[NameStr] = None
    email: Optional[EmailText] = None
    gender: Optional[Gender] = None
    nationality: Optional[str] = None
    college: Optional[str] = None
    major: Optional[str] = None
    minor: Optional[str] = None

    def changes(self) -> dict:
        """Fields the client supplied with a non-null value."""
        return {
            field: value
            for field, value in self.model_dump(exclude_unset=True).items()
            if value is not None
        }


class Student(StudentBase):
    id: int

    # Stored rows are trusted; don't re-run email validation on the way out
    email: str

    model_config = ConfigDict(from_attributes=True)


class StudentPage(BaseModel):
    """One page of students plus the metadata needed to walk the rest."""
    content: List[Student]
    total_elements: int
    total_pages: int
    number: int
    size: int
    number_of_elements: int
    first: bool
    last: bool
    empty: bool

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CountItem(BaseModel):
    key: str
    count: int
