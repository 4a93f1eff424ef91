from contextlib import contextmanager
from datetime import datetime, timezone

from sqlalchemy import delete, func, insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from .models import CourseORM, StudentCourseORM, StudentORM
from ..domain.entities import Course, CourseSummary, Student
from ..domain.errors import RosterError, UniqueViolationError, ValidationError
from ..application.use_cases.create_student import IStudentRepository
from ..application.use_cases.seed_courses import ICourseRepository

# SQLSTATE codes raised by PostgreSQL; SQLite only reports them in the message.
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"


def integrity_to_domain(e: IntegrityError) -> RosterError:
    pgcode = getattr(e.orig, "pgcode", None)
    msg = str(e.orig).lower()
    if pgcode == UNIQUE_VIOLATION or "unique" in msg or "duplicate key" in msg:
        return UniqueViolationError("A student with this email already exists")
    if pgcode == FOREIGN_KEY_VIOLATION or "foreign key" in msg:
        return ValidationError("One or more course ids do not exist")
    return ValidationError(f"Constraint violation: {e.orig}")


@contextmanager
def constraint_errors():
    try:
        yield
    except IntegrityError as e:
        raise integrity_to_domain(e) from e


def to_domain(s: StudentORM) -> Student:
    return Student(
        id=s.id,
        name=s.name,
        email=s.email,
        cohort=s.cohort,
        status=s.status,
        img_url=s.img_url,
        created_at=s.created_at,
        updated_at=s.updated_at,
        courses=[CourseSummary(id=c.id, name=c.name) for c in s.courses],
    )


def course_to_domain(c: CourseORM) -> Course:
    return Course(id=c.id, code=c.code, name=c.name, description=c.description)


class StudentRepository(IStudentRepository):
    """Student rows and their course links.

    Writes only flush; the caller owns the transaction and decides when to
    commit or roll back.
    """

    def __init__(self, db: Session): self.db = db

    def list_all(self) -> list[Student]:
        stmt = (select(StudentORM)
                .options(selectinload(StudentORM.courses))
                .order_by(StudentORM.id.desc()))
        return [to_domain(row) for row in self.db.scalars(stmt).all()]

    def get(self, student_id: int) -> Student | None:
        stmt = (select(StudentORM)
                .options(selectinload(StudentORM.courses))
                .where(StudentORM.id == student_id)
                .execution_options(populate_existing=True))
        row = self.db.scalars(stmt).first()
        return to_domain(row) if row else None

    def add(self, name: str, email: str, cohort: str | None, status: str,
            img_url: str | None = None) -> int:
        row = StudentORM(name=name, email=email, cohort=cohort, status=status, img_url=img_url)
        self.db.add(row)
        with constraint_errors():
            self.db.flush()
        return row.id

    def update(self, student_id: int, name: str, email: str, cohort: str | None,
               status: str) -> bool:
        row = self.db.get(StudentORM, student_id)
        if not row:
            return False
        row.name = name
        row.email = email
        row.cohort = cohort
        row.status = status
        row.updated_at = datetime.now(timezone.utc)
        with constraint_errors():
            self.db.flush()
        return True

    def link_courses(self, student_id: int, course_ids: list[int]) -> None:
        if not course_ids:
            return
        with constraint_errors():
            self.db.execute(
                insert(StudentCourseORM),
                [{"student_id": student_id, "course_id": cid} for cid in course_ids],
            )

    def replace_courses(self, student_id: int, course_ids: list[int]) -> None:
        self.db.execute(delete(StudentCourseORM).where(StudentCourseORM.student_id == student_id))
        self.link_courses(student_id, course_ids)

    def delete(self, student_id: int) -> bool:
        result = self.db.execute(delete(StudentORM).where(StudentORM.id == student_id))
        return result.rowcount > 0

    def count(self) -> int:
        return self.db.scalar(select(func.count()).select_from(StudentORM))

    def commit(self) -> None:
        with constraint_errors():
            self.db.commit()

    def rollback(self) -> None: self.db.rollback()


class CourseRepository(ICourseRepository):
    def __init__(self, db: Session): self.db = db

    def list_all(self) -> list[Course]:
        rows = self.db.scalars(select(CourseORM).order_by(CourseORM.name, CourseORM.id)).all()
        return [course_to_domain(row) for row in rows]

    def get_by_code(self, code: str) -> Course | None:
        row = self.db.scalars(select(CourseORM).where(CourseORM.code == code)).first()
        return course_to_domain(row) if row else None

    def create(self, code: str, name: str, description: str | None = None) -> Course:
        row = CourseORM(code=code, name=name, description=description)
        self.db.add(row); self.db.commit(); self.db.refresh(row)
        return course_to_domain(row)
