import structlog

from ...domain.entities import Student
from ...domain.errors import NotFoundError
from ..dto import StudentInput
from .create_student import IStudentRepository, id_in_range, normalize_student_input

logger = structlog.get_logger(__name__)


class UpdateStudent:
    """Replace a student's fields and its whole course set.

    Links are deleted and reinserted rather than diffed, so the supplied
    ids become the complete set; an empty list clears it.
    """

    def __init__(self, repo: IStudentRepository):
        self.repo = repo

    def execute(self, student_id: int, data: StudentInput) -> Student:
        clean = normalize_student_input(data)
        if not id_in_range(student_id):
            raise NotFoundError(f"Student {student_id} not found")
        try:
            if not self.repo.update(student_id, clean.name, clean.email, clean.cohort, clean.status):
                raise NotFoundError(f"Student {student_id} not found")
            self.repo.replace_courses(student_id, clean.course_ids)
            student = self.repo.get(student_id)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info("student_updated", student_id=student_id, courses=clean.course_ids)
        return student
