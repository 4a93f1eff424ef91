from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from ....application.dto import StudentInput
from ....application.use_cases.create_student import CreateStudent
from ....application.use_cases.delete_student import DeleteStudent
from ....application.use_cases.update_student import UpdateStudent
from ....infrastructure.db import get_db
from ....infrastructure.metrics import db_queries_total
from ....infrastructure.repositories import StudentRepository
from ....infrastructure.storage import get_storage
from ..payload import read_student_payload
from ..schemas import DeleteResp, ErrorResp, StudentOut, StudentUpdate

router = APIRouter(prefix="/api/students", tags=["students"])

ERRORS = {400: {"model": ErrorResp}, 404: {"model": ErrorResp}, 500: {"model": ErrorResp}}


@router.get("", response_model=list[StudentOut])
def list_students(db: Session = Depends(get_db)):
    # newest first
    db_queries_total.inc()
    return StudentRepository(db).list_all()

@router.post("", response_model=StudentOut, status_code=status.HTTP_201_CREATED, responses=ERRORS)
async def create_student(request: Request, db: Session = Depends(get_db),
                         storage=Depends(get_storage)):
    max_bytes = request.app.state.settings.MAX_IMAGE_BYTES
    data, image = await read_student_payload(request, max_bytes)
    uc = CreateStudent(repo=StudentRepository(db), storage=storage, max_image_bytes=max_bytes)
    db_queries_total.inc()
    # blocking upload + transaction
    return await run_in_threadpool(uc.execute, data, image)

@router.put("/{student_id}", response_model=StudentOut, responses=ERRORS)
def update_student(student_id: int, payload: StudentUpdate, db: Session = Depends(get_db)):
    data = StudentInput(
        name=payload.name,
        email=payload.email,
        cohort=payload.cohort,
        status=payload.status,
        course_ids=payload.course_ids or [],
    )
    db_queries_total.inc()
    return UpdateStudent(repo=StudentRepository(db)).execute(student_id, data)

@router.delete("/{student_id}", response_model=DeleteResp, responses=ERRORS)
def delete_student(student_id: int, db: Session = Depends(get_db)):
    db_queries_total.inc()
    DeleteStudent(repo=StudentRepository(db)).execute(student_id)
    return DeleteResp(message="Student deleted successfully", id=student_id)
