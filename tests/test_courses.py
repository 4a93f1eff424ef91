from sqlalchemy.pool import StaticPool

from roster_service.application.use_cases.seed_courses import DEFAULT_COURSES, SeedCourses
from roster_service.infrastructure.db import Database
from roster_service.infrastructure.diagnostics import check_connection
from roster_service.infrastructure.repositories import CourseRepository
from roster_service.scripts import check_connection as check_script
from roster_service.scripts import seed as seed_script


def memory_db():
    db = Database("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    db.create_all()
    return db


def test_seed_is_idempotent():
    database = memory_db()
    with database.session() as db:
        first = SeedCourses(CourseRepository(db)).execute()
        second = SeedCourses(CourseRepository(db)).execute()
        courses = CourseRepository(db).list_all()

    assert [created for _, created in first] == [True, True, True]
    assert [created for _, created in second] == [False, False, False]
    assert sorted(c.code for c in courses) == sorted(c["code"] for c in DEFAULT_COURSES)
    database.dispose()

def test_seed_only_adds_missing_courses():
    database = memory_db()
    with database.session() as db:
        CourseRepository(db).create("CBSE9-MATH", "CBSE 9 Math")
        results = SeedCourses(CourseRepository(db)).execute()

    assert {c.code: created for c, created in results} == {
        "CBSE9-SCI": True, "CBSE9-MATH": False, "CBSE9-ENG": True,
    }
    database.dispose()

def test_seed_function_reports_created_count():
    database = memory_db()
    assert seed_script.seed(database) == 3
    assert seed_script.seed(database) == 0
    database.dispose()

def test_seed_script_against_file_database(tmp_path):
    url = f"sqlite:///{tmp_path / 'roster.db'}"
    assert seed_script.main(["--database-url", url]) == 0
    assert seed_script.main(["--database-url", url]) == 0

def test_check_connection_reports_tables():
    database = memory_db()
    report = check_connection(database)
    assert report["dialect"] == "sqlite"
    assert {"students", "courses", "student_courses"} <= set(report["tables"])
    database.dispose()

def test_check_connection_script(tmp_path):
    url = f"sqlite:///{tmp_path / 'roster.db'}"
    assert check_script.main(["--database-url", url]) == 0
