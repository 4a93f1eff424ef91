import structlog

from ...domain.entities import Student, StudentStatus
from ...domain.errors import UpstreamError, ValidationError
from ..dto import ImageUpload, StudentInput

logger = structlog.get_logger(__name__)

DEFAULT_MAX_IMAGE_BYTES = 5 * 1024 * 1024
# ids are 32-bit INTEGER columns
MAX_ID = 2**31 - 1


class IStudentRepository:
    def list_all(self) -> list[Student]: ...
    def get(self, student_id: int) -> Student | None: ...
    def add(self, name: str, email: str, cohort: str | None, status: str,
            img_url: str | None = None) -> int: ...
    def update(self, student_id: int, name: str, email: str, cohort: str | None,
               status: str) -> bool: ...
    def link_courses(self, student_id: int, course_ids: list[int]) -> None: ...
    def replace_courses(self, student_id: int, course_ids: list[int]) -> None: ...
    def delete(self, student_id: int) -> bool: ...
    def commit(self) -> None: ...
    def rollback(self) -> None: ...


class IImageStorage:
    def upload(self, filename: str, content: bytes, content_type: str | None) -> str: ...


def _text(value) -> str:
    return "" if value is None else str(value).strip()


def parse_status(value) -> str:
    raw = _text(value).lower()
    if not raw:
        return StudentStatus.ACTIVE.value
    try:
        return StudentStatus(raw).value
    except ValueError:
        allowed = ", ".join(s.value for s in StudentStatus)
        raise ValidationError(f"Invalid status {value!r}; expected one of: {allowed}")


def id_in_range(value: int) -> bool:
    return 1 <= value <= MAX_ID


def parse_course_ids(values) -> list[int]:
    """Coerce ids to ints, dropping repeats but keeping first-seen order."""
    ids: list[int] = []
    for v in values or []:
        if isinstance(v, bool):
            raise ValidationError(f"Invalid course id: {v!r}")
        if isinstance(v, int):
            cid = v
        elif isinstance(v, str) and v.strip().isascii() and v.strip().isdigit():
            cid = int(v.strip())
        else:
            raise ValidationError(f"Invalid course id: {v!r}")
        if not id_in_range(cid):
            raise ValidationError(f"Invalid course id: {v!r}")
        if cid not in ids:
            ids.append(cid)
    return ids


def normalize_student_input(data: StudentInput) -> StudentInput:
    name = _text(data.name)
    if not name:
        raise ValidationError("Name is required")
    email = _text(data.email)
    if not email:
        raise ValidationError("Email is required")
    return StudentInput(
        name=name,
        email=email,
        cohort=_text(data.cohort) or None,
        status=parse_status(data.status),
        course_ids=parse_course_ids(data.course_ids),
    )


class CreateStudent:
    """Create a student and its course links in one transaction.

    The optional image is uploaded before the transaction opens, so an upload
    failure leaves the database untouched. A rollback after a successful
    upload leaves the stored object behind; it is logged, not removed.
    """

    def __init__(self, repo: IStudentRepository, storage: IImageStorage | None = None,
                 max_image_bytes: int = DEFAULT_MAX_IMAGE_BYTES):
        self.repo = repo
        self.storage = storage
        self.max_image_bytes = max_image_bytes

    def execute(self, data: StudentInput, image: ImageUpload | None = None) -> Student:
        clean = normalize_student_input(data)
        if image is not None and len(image.content) > self.max_image_bytes:
            raise ValidationError(f"Image exceeds the {self.max_image_bytes} byte limit")

        img_url = None
        if image is not None:
            if self.storage is None:
                raise UpstreamError("Image storage is not configured")
            img_url = self.storage.upload(image.filename, image.content, image.content_type)

        try:
            student_id = self.repo.add(clean.name, clean.email, clean.cohort, clean.status, img_url)
            self.repo.link_courses(student_id, clean.course_ids)
            student = self.repo.get(student_id)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            if img_url:
                logger.warning("student_create_rolled_back_image_orphaned", img_url=img_url)
            raise

        logger.info("student_created", student_id=student.id, courses=clean.course_ids)
        return student
