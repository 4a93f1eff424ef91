from datetime import datetime

from pydantic import AliasChoices, BaseModel, Field


class CourseSummaryOut(BaseModel):
    id: int
    name: str
    class Config: from_attributes = True

class StudentOut(BaseModel):
    id: int
    name: str
    email: str
    cohort: str | None = None
    status: str
    img_url: str | None = None
    created_at: datetime = Field(validation_alias=AliasChoices("created_at", "createdAt"),
                                 serialization_alias="createdAt")
    updated_at: datetime = Field(validation_alias=AliasChoices("updated_at", "updatedAt"),
                                 serialization_alias="updatedAt")
    courses: list[CourseSummaryOut] = []
    class Config: from_attributes = True

class StudentUpdate(BaseModel):
    name: str | None = None
    email: str | None = None
    cohort: str | None = None
    status: str | None = None
    course_ids: list[int | str] | None = Field(default=None, alias="courseIds")

class DeleteResp(BaseModel):
    message: str
    id: int

class CourseOut(BaseModel):
    id: int
    code: str
    name: str
    description: str | None = None
    class Config: from_attributes = True

class HealthResp(BaseModel):
    status: str = "healthy"

class ErrorResp(BaseModel):
    error: str
    code: str
