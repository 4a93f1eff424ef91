import json

from fastapi import Request
from starlette.datastructures import UploadFile

from ...application.dto import ImageUpload, StudentInput
from ...domain.errors import ValidationError

FORM_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")
COURSE_FIELDS = ("courseIds", "courseIds[]", "courses", "courses[]")


def _split(values: list) -> list:
    out = []
    for v in values:
        if isinstance(v, str):
            out.extend(p for p in v.split(",") if p.strip())
        else:
            out.append(v)
    return out


async def read_student_payload(request: Request, max_image_bytes: int | None = None
                               ) -> tuple[StudentInput, ImageUpload | None]:
    """Parse a student body sent either as a form (with optional image) or as JSON.

    With ``max_image_bytes`` set, at most one byte past the limit is read from
    the image, enough for the size check to reject it.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_TYPES):
        form = await request.form()
        course_ids = []
        for key in COURSE_FIELDS:
            course_ids.extend(_split(form.getlist(key)))
        data = StudentInput(
            name=form.get("name"),
            email=form.get("email"),
            cohort=form.get("cohort"),
            status=form.get("status"),
            course_ids=course_ids,
        )
        image = None
        upload = form.get("image")
        if isinstance(upload, UploadFile) and upload.filename:
            size = -1 if max_image_bytes is None else max_image_bytes + 1
            content = await upload.read(size)
            if content:
                image = ImageUpload(filename=upload.filename, content=content,
                                    content_type=upload.content_type)
        return data, image

    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationError("Request body must be JSON or multipart form data")
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")

    course_ids = body.get("courseIds", body.get("courses"))
    if course_ids is None:
        course_ids = []
    elif not isinstance(course_ids, list):
        course_ids = [course_ids]
    data = StudentInput(
        name=body.get("name"),
        email=body.get("email"),
        cohort=body.get("cohort"),
        status=body.get("status"),
        course_ids=course_ids,
    )
    return data, None
