from unittest.mock import patch

from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from roster_service.application.use_cases.create_student import CreateStudent
from roster_service.config import Settings
from roster_service.domain.errors import ValidationError
from roster_service.main import create_app


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}

def test_metrics_endpoint(client):
    client.get("/health")
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "text/plain" in response.headers["content-type"]
    assert "http_requests_total" in response.text

def test_list_courses_sorted_by_name(client):
    response = client.get("/api/courses")
    assert response.status_code == 200
    courses = response.json()
    assert [c["name"] for c in courses] == ["CBSE 9 English", "CBSE 9 Math", "CBSE 9 Science"]
    assert courses[0] == {"id": 3, "code": "CBSE9-ENG", "name": "CBSE 9 English",
                          "description": "English for Class 9 CBSE"}

def test_unhandled_error_returns_generic_message(app):
    with patch("roster_service.interfaces.http.routers.students.StudentRepository.list_all",
               side_effect=RuntimeError("secret detail")):
        with TestClient(app, raise_server_exceptions=False) as c:
            response = c.get("/api/students")
    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error", "code": "UNHANDLED"}

def test_database_unavailable_is_upstream_failure(app):
    err = OperationalError("SELECT 1", {}, Exception("connection refused"))
    with patch("roster_service.interfaces.http.routers.courses.CourseRepository.list_all",
               side_effect=err):
        with TestClient(app) as c:
            response = c.get("/api/courses")
    assert response.status_code == 500
    assert response.json()["code"] == "UPSTREAM_FAILURE"

def test_image_rejected_when_storage_not_configured(test_settings, database, courses):
    app = create_app(settings=test_settings, database=database)
    with TestClient(app) as c:
        assert app.state.storage is None
        response = c.post(
            "/api/students",
            data={"name": "Jane Doe", "email": "jane@example.com"},
            files={"image": ("jane.png", b"img", "image/png")},
        )
    assert response.status_code == 500
    assert response.json()["code"] == "UPSTREAM_FAILURE"

def test_image_size_limit_from_settings(database, storage, courses):
    settings = Settings(DATABASE_URL="sqlite://", LOG_LEVEL="WARNING", MAX_IMAGE_BYTES=4)
    app = create_app(settings=settings, database=database, storage=storage)
    with TestClient(app) as c:
        response = c.post(
            "/api/students",
            data={"name": "Jane Doe", "email": "jane@example.com"},
            files={"image": ("jane.png", b"too large", "image/png")},
        )
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION"
    storage.upload.assert_not_called()

def test_shutdown_releases_resources(app, storage):
    with TestClient(app):
        pass
    storage.close.assert_called_once()

def test_unsupported_method_uses_error_body(client):
    response = client.patch("/api/students/1", json={})
    assert response.status_code == 405
    assert response.json() == {"error": "Method Not Allowed", "code": "METHOD_NOT_ALLOWED"}

def test_unknown_route_uses_error_body(client):
    response = client.get("/api/teachers")
    assert response.status_code == 404
    assert response.json() == {"error": "Not Found", "code": "NOT_FOUND"}

def test_metrics_labelled_by_route_template(client):
    client.delete("/api/students/424242")
    text = client.get("/metrics").text
    assert 'endpoint="/api/students/{student_id}"' in text
    assert 'endpoint="/api/students/424242"' not in text

def test_oversize_image_read_stops_past_limit(database, storage, courses):
    settings = Settings(DATABASE_URL="sqlite://", LOG_LEVEL="WARNING", MAX_IMAGE_BYTES=4)
    app = create_app(settings=settings, database=database, storage=storage)
    with patch.object(CreateStudent, "execute", autospec=True,
                      side_effect=ValidationError("too large")) as execute:
        with TestClient(app) as c:
            response = c.post(
                "/api/students",
                data={"name": "Jane Doe", "email": "jane@example.com"},
                files={"image": ("jane.png", b"x" * 1000, "image/png")},
            )
    assert response.status_code == 400
    _, _, image = execute.call_args.args
    assert len(image.content) == 5
