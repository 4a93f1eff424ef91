import os
import sys
import pytest
from unittest.mock import MagicMock

CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.dirname(CURRENT_DIR)
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from fastapi.testclient import TestClient
from sqlalchemy import func, select
from sqlalchemy.pool import StaticPool

from roster_service.application.use_cases.seed_courses import SeedCourses
from roster_service.config import Settings
from roster_service.infrastructure.db import Database
from roster_service.infrastructure.models import StudentCourseORM
from roster_service.infrastructure.repositories import CourseRepository, StudentRepository
from roster_service.infrastructure.storage import SupabaseImageStorage
from roster_service.main import create_app

IMAGE_URL = "https://proj.supabase.co/storage/v1/object/public/student-images/1700000000000-abcd1234.png"


@pytest.fixture
def test_settings():
    """Settings without object storage and with quiet logging"""
    return Settings(
        DATABASE_URL="sqlite://",
        SUPABASE_URL="",
        SUPABASE_SERVICE_ROLE_KEY="",
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def database():
    """In-memory SQLite shared by the app and the test through one connection"""
    db = Database("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture
def courses(database):
    """Seeded courses: 1 Science, 2 Math, 3 English"""
    with database.session() as db:
        return [course for course, _ in SeedCourses(CourseRepository(db)).execute()]


@pytest.fixture
def storage():
    mock = MagicMock(spec=SupabaseImageStorage)
    mock.upload.return_value = IMAGE_URL
    return mock


@pytest.fixture
def app(test_settings, database, storage, courses):
    return create_app(settings=test_settings, database=database, storage=storage)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def counts(database):
    """Return (students, enrollments) row counts"""
    def _counts():
        with database.session() as db:
            students = StudentRepository(db).count()
            links = db.scalar(select(func.count()).select_from(StudentCourseORM))
        return students, links
    return _counts
