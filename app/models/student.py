import enum

from sqlalchemy import Column, Enum, Integer, String
from app.core.database import Base


class Gender(str, enum.Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"
    OTHER = "OTHER"


class Student(Base):
    __tablename__ = "student"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    # Stored by name (VARCHAR), so new members never shift existing rows
    gender = Column(Enum(Gender, native_enum=False, length=32), nullable=False)
    nationality = Column(String, nullable=True)
    college = Column(String, nullable=True)
    major = Column(String, nullable=True)
    minor = Column(String, nullable=True)

    def __eq__(self, other):
        if self is other:
            return True
        if not isinstance(other, Student):
            return NotImplemented
        if self.id is not None and other.id is not None:
            return self.id == other.id
        return (self.name, self.email, self.gender) == (other.name, other.email, other.gender)

    def __hash__(self):
        if self.id is not None:
            return hash(self.id)
        return hash((self.name, self.email, self.gender))

    def __repr__(self):
        return f"<Student id={self.id} email={self.email!r}>"
