from dataclasses import dataclass, field
from typing import Any


@dataclass
class StudentInput:
    name: Any = None
    email: Any = None
    cohort: Any = None
    status: Any = None
    course_ids: list = field(default_factory=list)


@dataclass
class ImageUpload:
    filename: str
    content: bytes
    content_type: str | None = None
