# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for the v1 API routers.

Services are patched; these tests cover routing, authentication, request
validation and the mapping of domain errors to HTTP status codes.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import SecretStr

from src.api.dependencies import get_auth_service, get_db
from src.api.errors import domain_error_to_http
from src.api.middleware.auth import AuthMiddleware
from src.api.middleware.rate_limit import limiter
from src.api.routes import health
from src.api.v1 import router as v1_router
from src.core.config.settings import JWTSettings
from src.domains.auth.jwt import JWTManager
from src.domains.auth.service import InvalidCredentialsError, RegistrationNotAllowedError
from src.domains.course.access import CourseAccessDeniedError
from src.domains.course.service import TeacherRequiredError
from src.domains.enrollment.service import (
    AlreadyEnrolledError,
    EnrollmentNotFoundError,
    InvalidEnrollmentStatusError,
)
from src.domains.errors import (
    ConflictError,
    DomainError,
    InvalidArgumentError,
    InvalidStateError,
    NotFoundError,
    UnauthorizedError,
)
from src.models.common import UserRole


@pytest.fixture
def jwt_manager() -> JWTManager:
    return JWTManager(JWTSettings(secret_key=SecretStr("test-secret-key-for-api-testing")))


@pytest.fixture
def mock_session() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def auth_service() -> MagicMock:
    service = MagicMock()
    service.register = AsyncMock()
    service.login = AsyncMock()
    service.get_profile = AsyncMock()
    service.update_profile = AsyncMock()
    service.change_password = AsyncMock()
    service.search_users = AsyncMock()
    return service


@pytest.fixture
def app(jwt_manager: JWTManager, mock_session: AsyncMock, auth_service: MagicMock) -> FastAPI:
    """Create test FastAPI app."""
    app = FastAPI()
    app.state.limiter = limiter
    app.add_middleware(AuthMiddleware, jwt_manager=jwt_manager)
    app.include_router(v1_router)

    async def override_get_db():
        yield mock_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_auth_service] = lambda: auth_service
    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def as_role(jwt_manager: JWTManager):
    """Build Authorization headers for a user of the given role."""

    def headers(role: UserRole, user_id: str = "user-1") -> dict[str, str]:
        tokens = jwt_manager.create_token_pair(user_id, f"{user_id}@example.com", role)
        return {"Authorization": f"Bearer {tokens.access_token}"}

    return headers


class TestRouting:
    """Tests for API routing."""

    def test_routes_registered(self, app: FastAPI) -> None:
        routes = app.openapi()["paths"]

        assert "/api/v1/auth/register" in routes
        assert "/api/v1/auth/login" in routes
        assert "/api/v1/auth/me" in routes
        assert "/api/v1/auth/me/password" in routes
        assert "/api/v1/auth/users" in routes
        assert "/api/v1/courses" in routes
        assert "/api/v1/courses/{course_id}/invite" in routes
        assert "/api/v1/courses/{course_id}/request-access" in routes
        assert "/api/v1/courses/{course_id}/enrollments" in routes
        assert "/api/v1/enrollments/me" in routes
        assert "/api/v1/enrollments/{enrollment_id}/decision" in routes
        assert "/api/v1/invitations/{enrollment_id}/respond" in routes
        assert "/api/v1/schools/teachers" in routes
        assert "/api/v1/students" in routes
        assert "/api/v1/students/mine" in routes

    @pytest.mark.parametrize(
        ("method", "path"),
        [
            ("get", "/api/v1/courses"),
            ("get", "/api/v1/auth/me"),
            ("get", "/api/v1/enrollments/me"),
            ("get", "/api/v1/students/mine"),
            ("get", "/api/v1/students"),
            ("put", "/api/v1/auth/me/password"),
            ("get", "/api/v1/schools/teachers"),
        ],
    )
    def test_protected_routes_require_token(self, client: TestClient, method: str, path: str) -> None:
        response = getattr(client, method)(path)

        assert response.status_code == 401


class TestAuthAPI:
    """Tests for /auth endpoints."""

    def test_login_with_wrong_password_is_401(self, client: TestClient, auth_service: MagicMock) -> None:
        auth_service.login.side_effect = InvalidCredentialsError("Invalid email or password")

        response = client.post("/api/v1/auth/login", json={"email": "a@b.tj", "password": "nope"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid email or password"

    def test_login_returns_tokens(
        self,
        client: TestClient,
        auth_service: MagicMock,
        jwt_manager: JWTManager,
        make_user,
    ) -> None:
        user = make_user(UserRole.TEACHER, email="t@school.tj")
        auth_service.login.return_value = (
            user,
            jwt_manager.create_token_pair(user.id, user.email, UserRole.TEACHER),
        )

        response = client.post("/api/v1/auth/login", json={"email": "t@school.tj", "password": "secret1"})

        assert response.status_code == 200
        body = response.json()
        assert body["token_type"] == "Bearer"
        assert body["user"]["role"] == "teacher"
        claims = jwt_manager.decode_token(body["access_token"], expected_type="access")
        assert claims.sub == user.id

    def test_register_admin_is_400(self, client: TestClient, auth_service: MagicMock) -> None:
        auth_service.register.side_effect = RegistrationNotAllowedError(
            "Admin accounts cannot be self-registered"
        )

        response = client.post(
            "/api/v1/auth/register",
            json={"email": "root@x.tj", "password": "secret1", "role": "admin"},
        )

        assert response.status_code == 400

    def test_register_validates_body(self, client: TestClient, auth_service: MagicMock) -> None:
        response = client.post(
            "/api/v1/auth/register",
            json={"email": "not-an-email", "password": "1", "role": "wizard"},
        )

        assert response.status_code == 422
        auth_service.register.assert_not_awaited()

    def test_register_creates_user(self, client: TestClient, auth_service: MagicMock, make_user) -> None:
        auth_service.register.return_value = make_user(UserRole.STUDENT, email="s@x.tj")

        response = client.post(
            "/api/v1/auth/register",
            json={"email": "s@x.tj", "password": "secret1", "role": "student"},
        )

        assert response.status_code == 201
        assert response.json()["email"] == "s@x.tj"
        auth_service.register.assert_awaited_once_with(
            email="s@x.tj",
            password="secret1",
            role=UserRole.STUDENT,
            name=None,
        )

    def test_change_password(self, client: TestClient, auth_service: MagicMock, as_role) -> None:
        response = client.put(
            "/api/v1/auth/me/password",
            json={"current_password": "secret1", "new_password": "secret2"},
            headers=as_role(UserRole.STUDENT, "student-1"),
        )

        assert response.status_code == 200
        assert response.json() == {"message": "Password changed"}
        auth_service.change_password.assert_awaited_once_with(
            user_id="student-1",
            current_password="secret1",
            new_password="secret2",
        )

    def test_change_password_with_wrong_current_is_400(
        self,
        client: TestClient,
        auth_service: MagicMock,
        as_role,
    ) -> None:
        auth_service.change_password.side_effect = InvalidCredentialsError("Current password is incorrect")

        response = client.put(
            "/api/v1/auth/me/password",
            json={"current_password": "wrong", "new_password": "secret2"},
            headers=as_role(UserRole.TEACHER),
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Current password is incorrect"

    def test_change_password_enforces_minimum_length(
        self,
        client: TestClient,
        auth_service: MagicMock,
        as_role,
    ) -> None:
        response = client.put(
            "/api/v1/auth/me/password",
            json={"current_password": "secret1", "new_password": "123"},
            headers=as_role(UserRole.TEACHER),
        )

        assert response.status_code == 422
        auth_service.change_password.assert_not_awaited()

    def test_search_users(self, client: TestClient, auth_service: MagicMock, as_role, make_user) -> None:
        auth_service.search_users.return_value = [make_user(UserRole.STUDENT, email="nodir@x.tj")]

        response = client.get("/api/v1/auth/users?q=nod", headers=as_role(UserRole.TEACHER))

        assert response.status_code == 200
        assert response.json()["items"][0]["email"] == "nodir@x.tj"
        auth_service.search_users.assert_awaited_once_with("nod", limit=20)

    def test_students_cannot_search_users(self, client: TestClient, auth_service: MagicMock, as_role) -> None:
        response = client.get("/api/v1/auth/users?q=nod", headers=as_role(UserRole.STUDENT))

        assert response.status_code == 403
        auth_service.search_users.assert_not_awaited()


class TestCoursesAPI:
    """Tests for /courses endpoints."""

    @patch("src.api.v1.courses.CourseService")
    def test_list_courses(self, mock_service_cls: MagicMock, client: TestClient, as_role) -> None:
        mock_service_cls.return_value.list_courses = AsyncMock(return_value=[])

        response = client.get("/api/v1/courses", headers=as_role(UserRole.STUDENT, "student-1"))

        assert response.status_code == 200
        assert response.json() == {"items": [], "total": 0}
        mock_service_cls.return_value.list_courses.assert_awaited_once_with("student-1", UserRole.STUDENT)

    @patch("src.api.v1.courses.CourseService")
    def test_school_course_without_teacher_is_400(
        self,
        mock_service_cls: MagicMock,
        client: TestClient,
        as_role,
    ) -> None:
        mock_service_cls.return_value.create_course = AsyncMock(
            side_effect=TeacherRequiredError("teacher_id is required for school courses")
        )

        response = client.post(
            "/api/v1/courses",
            json={"title": "Physics"},
            headers=as_role(UserRole.SCHOOL_ADMIN),
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "teacher_id is required for school courses"

    @patch("src.api.v1.courses.EnrollmentService")
    def test_invite_sends_invitation(
        self,
        mock_service_cls: MagicMock,
        client: TestClient,
        as_role,
    ) -> None:
        mock_service_cls.return_value.invite_student = AsyncMock(return_value=None)

        response = client.post(
            "/api/v1/courses/course-1/invite",
            json={"email": "s@x.tj"},
            headers=as_role(UserRole.TEACHER, "teacher-1"),
        )

        assert response.status_code == 200
        assert response.json() == {"message": "Invitation sent"}
        mock_service_cls.return_value.invite_student.assert_awaited_once_with(
            inviter_id="teacher-1",
            role=UserRole.TEACHER,
            course_id="course-1",
            student_email="s@x.tj",
        )

    @pytest.mark.parametrize(
        ("error", "expected_status"),
        [
            (AlreadyEnrolledError("Student already enrolled or invited"), 409),
            (CourseAccessDeniedError("You do not manage this course"), 403),
        ],
    )
    @patch("src.api.v1.courses.EnrollmentService")
    def test_invite_errors(
        self,
        mock_service_cls: MagicMock,
        client: TestClient,
        as_role,
        error: DomainError,
        expected_status: int,
    ) -> None:
        mock_service_cls.return_value.invite_student = AsyncMock(side_effect=error)

        response = client.post(
            "/api/v1/courses/course-1/invite",
            json={"email": "s@x.tj"},
            headers=as_role(UserRole.TEACHER),
        )

        assert response.status_code == expected_status
        assert response.json()["detail"] == str(error)

    @patch("src.api.v1.courses.EnrollmentService")
    def test_request_access_is_students_only(
        self,
        mock_service_cls: MagicMock,
        client: TestClient,
        as_role,
    ) -> None:
        mock_service_cls.return_value.request_enrollment = AsyncMock()

        response = client.post("/api/v1/courses/course-1/request-access", headers=as_role(UserRole.TEACHER))

        assert response.status_code == 403
        mock_service_cls.return_value.request_enrollment.assert_not_awaited()

    @patch("src.api.v1.courses.EnrollmentService")
    def test_request_access_conflict(
        self,
        mock_service_cls: MagicMock,
        client: TestClient,
        as_role,
    ) -> None:
        mock_service_cls.return_value.request_enrollment = AsyncMock(
            side_effect=AlreadyEnrolledError("Student already enrolled or access requested")
        )

        response = client.post("/api/v1/courses/course-1/request-access", headers=as_role(UserRole.STUDENT))

        assert response.status_code == 409


class TestEnrollmentsAPI:
    """Tests for enrollment decision and invitation response endpoints."""

    @patch("src.api.v1.enrollments.EnrollmentService")
    def test_decision_on_decided_enrollment_is_409(
        self,
        mock_service_cls: MagicMock,
        client: TestClient,
        as_role,
    ) -> None:
        mock_service_cls.return_value.approve_or_reject_enrollment = AsyncMock(
            side_effect=InvalidEnrollmentStatusError("Enrollment is already decided (active)")
        )

        response = client.post(
            "/api/v1/enrollments/enr-1/decision",
            json={"approve": True},
            headers=as_role(UserRole.TEACHER),
        )

        assert response.status_code == 409

    @patch("src.api.v1.enrollments.EnrollmentService")
    def test_reject_message(self, mock_service_cls: MagicMock, client: TestClient, as_role) -> None:
        mock_service_cls.return_value.approve_or_reject_enrollment = AsyncMock(return_value=None)

        response = client.post(
            "/api/v1/enrollments/enr-1/decision",
            json={"approve": False},
            headers=as_role(UserRole.SCHOOL_ADMIN, "admin-1"),
        )

        assert response.status_code == 200
        assert response.json() == {"message": "Enrollment rejected"}

    @patch("src.api.v1.enrollments.EnrollmentService")
    def test_respond_to_unknown_invitation_is_404(
        self,
        mock_service_cls: MagicMock,
        client: TestClient,
        as_role,
    ) -> None:
        mock_service_cls.return_value.respond_to_invitation = AsyncMock(
            side_effect=EnrollmentNotFoundError("Enrollment not found")
        )

        response = client.post(
            "/api/v1/invitations/enr-1/respond",
            json={"accept": True},
            headers=as_role(UserRole.STUDENT),
        )

        assert response.status_code == 404

    @patch("src.api.v1.enrollments.EnrollmentService")
    def test_accept_invitation(self, mock_service_cls: MagicMock, client: TestClient, as_role) -> None:
        mock_service_cls.return_value.respond_to_invitation = AsyncMock(return_value=None)

        response = client.post(
            "/api/v1/invitations/enr-1/respond",
            json={"accept": True},
            headers=as_role(UserRole.STUDENT, "student-1"),
        )

        assert response.status_code == 200
        assert response.json() == {"message": "Invitation accepted"}
        mock_service_cls.return_value.respond_to_invitation.assert_awaited_once_with(
            student_id="student-1",
            enrollment_id="enr-1",
            accept=True,
        )


class TestDomainErrorMapping:
    """Tests for domain_error_to_http."""

    @pytest.mark.parametrize(
        ("error", "expected_status"),
        [
            (UnauthorizedError("no"), 403),
            (NotFoundError("missing"), 404),
            (InvalidArgumentError("bad"), 400),
            (ConflictError("dup"), 409),
            (InvalidStateError("decided"), 409),
            (DomainError("boom"), 500),
        ],
    )
    def test_status_codes(self, error: DomainError, expected_status: int) -> None:
        http_error = domain_error_to_http(error)

        assert http_error.status_code == expected_status
        assert http_error.detail == str(error)


class TestSchoolsAndStudentsAPI:
    """Tests for /schools/teachers and the /students listings."""

    @patch("src.api.v1.schools.SchoolService")
    def test_list_teachers(
        self,
        mock_service_cls: MagicMock,
        client: TestClient,
        as_role,
        make_user,
    ) -> None:
        teacher = make_user(UserRole.TEACHER, email="t@school.tj")
        mock_service_cls.return_value.list_teachers = AsyncMock(return_value=[teacher])

        response = client.get("/api/v1/schools/teachers", headers=as_role(UserRole.SCHOOL_ADMIN, "admin-1"))

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 1
        assert body["items"][0]["email"] == "t@school.tj"

    def test_teacher_cannot_list_school_teachers(self, client: TestClient, as_role) -> None:
        response = client.get("/api/v1/schools/teachers", headers=as_role(UserRole.TEACHER))

        assert response.status_code == 403

    @patch("src.api.v1.students.StudentService")
    def test_my_students(
        self,
        mock_service_cls: MagicMock,
        client: TestClient,
        as_role,
        make_user,
    ) -> None:
        mock_service_cls.return_value.list_my_students = AsyncMock(
            return_value=[make_user(UserRole.STUDENT, email="s@x.tj")]
        )

        response = client.get("/api/v1/students/mine", headers=as_role(UserRole.TEACHER, "teacher-1"))

        assert response.status_code == 200
        assert response.json()["total"] == 1
        mock_service_cls.return_value.list_my_students.assert_awaited_once_with("teacher-1", UserRole.TEACHER)

    @patch("src.api.v1.students.StudentService")
    def test_student_directory(
        self,
        mock_service_cls: MagicMock,
        client: TestClient,
        as_role,
        make_user,
    ) -> None:
        mock_service_cls.return_value.list_students = AsyncMock(
            return_value=([make_user(UserRole.STUDENT, email="s@x.tj")], 42)
        )

        response = client.get(
            "/api/v1/students?limit=1&offset=5&search=s",
            headers=as_role(UserRole.SCHOOL_ADMIN),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 42
        assert len(body["items"]) == 1
        mock_service_cls.return_value.list_students.assert_awaited_once_with(limit=1, offset=5, search="s")

    @patch("src.api.v1.students.StudentService")
    def test_student_directory_defaults(self, mock_service_cls: MagicMock, client: TestClient, as_role) -> None:
        mock_service_cls.return_value.list_students = AsyncMock(return_value=([], 0))

        response = client.get("/api/v1/students", headers=as_role(UserRole.ADMIN))

        assert response.status_code == 200
        mock_service_cls.return_value.list_students.assert_awaited_once_with(limit=50, offset=0, search=None)

    def test_student_directory_is_staff_only(self, client: TestClient, as_role) -> None:
        response = client.get("/api/v1/students", headers=as_role(UserRole.STUDENT))

        assert response.status_code == 403

    def test_student_directory_rejects_oversized_page(self, client: TestClient, as_role) -> None:
        response = client.get("/api/v1/students?limit=1000", headers=as_role(UserRole.TEACHER))

        assert response.status_code == 422


class TestHealth:
    @patch("src.api.routes.health.check_database_connection", new_callable=AsyncMock)
    def test_degraded_without_database(self, mock_check: AsyncMock) -> None:
        mock_check.return_value = False
        app = FastAPI()
        app.include_router(health.router)

        response = TestClient(app).get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "degraded"
        assert response.json()["database"] == "unhealthy"
