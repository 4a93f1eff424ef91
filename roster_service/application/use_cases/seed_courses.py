import structlog

from ...domain.entities import Course

logger = structlog.get_logger(__name__)

DEFAULT_COURSES = [
    {"code": "CBSE9-SCI", "name": "CBSE 9 Science", "description": "Science for Class 9 CBSE"},
    {"code": "CBSE9-MATH", "name": "CBSE 9 Math", "description": "Mathematics for Class 9 CBSE"},
    {"code": "CBSE9-ENG", "name": "CBSE 9 English", "description": "English for Class 9 CBSE"},
]


class ICourseRepository:
    def list_all(self) -> list[Course]: ...
    def get_by_code(self, code: str) -> Course | None: ...
    def create(self, code: str, name: str, description: str | None = None) -> Course: ...


class SeedCourses:
    """Insert any default course whose code is not present yet."""

    def __init__(self, repo: ICourseRepository, courses: list[dict] | None = None):
        self.repo = repo
        self.courses = DEFAULT_COURSES if courses is None else courses

    def execute(self) -> list[tuple[Course, bool]]:
        results = []
        for course_def in self.courses:
            existing = self.repo.get_by_code(course_def["code"])
            if existing:
                logger.info("course_exists", code=existing.code, name=existing.name)
                results.append((existing, False))
                continue
            course = self.repo.create(course_def["code"], course_def["name"], course_def.get("description"))
            logger.info("course_created", code=course.code, name=course.name)
            results.append((course, True))
        return results
