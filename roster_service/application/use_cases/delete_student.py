import structlog

from ...domain.errors import NotFoundError
from .create_student import IStudentRepository, id_in_range

logger = structlog.get_logger(__name__)


class DeleteStudent:
    def __init__(self, repo: IStudentRepository):
        self.repo = repo

    def execute(self, student_id: int) -> None:
        if not id_in_range(student_id):
            raise NotFoundError(f"Student {student_id} not found")
        try:
            if not self.repo.delete(student_id):
                raise NotFoundError(f"Student {student_id} not found")
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise
        logger.info("student_deleted", student_id=student_id)
