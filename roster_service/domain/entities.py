import enum
from dataclasses import dataclass, field
from datetime import datetime


class StudentStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


@dataclass(frozen=True)
class CourseSummary:
    id: int
    name: str


@dataclass(frozen=True)
class Course:
    id: int
    code: str
    name: str
    description: str | None = None


@dataclass(frozen=True)
class Student:
    id: int
    name: str
    email: str
    cohort: str | None
    status: str
    img_url: str | None
    created_at: datetime
    updated_at: datetime
    courses: list[CourseSummary] = field(default_factory=list)
