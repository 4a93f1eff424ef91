from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ....infrastructure.db import get_db
from ....infrastructure.metrics import db_queries_total
from ....infrastructure.repositories import CourseRepository
from ..schemas import CourseOut

router = APIRouter(prefix="/api/courses", tags=["courses"])

@router.get("", response_model=list[CourseOut])
def list_courses(db: Session = Depends(get_db)):
    db_queries_total.inc()
    return CourseRepository(db).list_all()
