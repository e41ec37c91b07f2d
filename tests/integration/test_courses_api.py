# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for course endpoints and error translation."""

import pytest
from fastapi.testclient import TestClient

from quickfeed.api.errors import GENERIC_SERVER_ERROR
from quickfeed.core.config.settings import SCMSettings
from quickfeed.infrastructure.database.models import Course, EnrollmentStatus, Repository


def _course_body(**overrides) -> dict:
    body = {
        "name": "Distributed Systems",
        "code": "DAT520",
        "year": 2025,
        "provider": "github",
        "directory_path": "dat520-2025",
    }
    body.update(overrides)
    return body


class TestCreateCourse:
    """Tests for POST /api/v1/courses."""

    def test_created(self, client: TestClient, auth, storage, scm, scm_factory, course_setup) -> None:
        response = client.post("/api/v1/courses", json=_course_body(), headers=auth(1))

        assert response.status_code == 201
        data = response.json()
        assert data["code"] == "DAT520"
        assert data["organization_path"] == "dat520-2025"
        assert scm_factory.tokens == [("github", "teacher-token")]
        assert scm.closed is True
        assert len(storage.filter(Repository, directory_id=data["directory_id"])) == 4

    def test_requires_admin(self, client: TestClient, auth, course_setup) -> None:
        response = client.post("/api/v1/courses", json=_course_body(), headers=auth(2))

        assert response.status_code == 403

    def test_admin_without_token(self, client: TestClient, auth, storage, make_user, course_setup) -> None:
        storage.seed(make_user(5, "root", is_admin=True))

        response = client.post("/api/v1/courses", json=_course_body(), headers=auth(5))

        assert response.status_code == 403
        assert "access token" in response.json()["detail"]

    def test_directory_in_use(self, client: TestClient, auth, storage, course_setup) -> None:
        body = _course_body(directory_id=course_setup.directory_id, directory_path=None)

        response = client.post("/api/v1/courses", json=body, headers=auth(1))

        assert response.status_code == 409
        assert len(storage.all(Course)) == 1

    def test_unknown_directory(self, client: TestClient, auth, course_setup) -> None:
        body = _course_body(directory_id=12345, directory_path=None)

        assert client.post("/api/v1/courses", json=body, headers=auth(1)).status_code == 404

    def test_no_token_for_provider(self, client: TestClient, auth, course_setup) -> None:
        response = client.post("/api/v1/courses", json=_course_body(provider="gitlab"), headers=auth(1))

        assert response.status_code == 403

    def test_missing_directory_reference(self, client: TestClient, auth, course_setup) -> None:
        response = client.post("/api/v1/courses", json=_course_body(directory_path=None), headers=auth(1))

        assert response.status_code == 422

    def test_provider_failure_is_generic(self, client: TestClient, auth, storage, scm, course_setup) -> None:
        scm.failing_repositories.add("solutions")

        response = client.post("/api/v1/courses", json=_course_body(), headers=auth(1))

        assert response.status_code == 500
        assert response.json() == {"detail": GENERIC_SERVER_ERROR}
        assert scm.deleted_directories == ["dat520-2025"]
        assert len(storage.all(Course)) == 1


class TestCourseQueries:
    """Tests for course lookups and updates."""

    def test_get_course(self, client: TestClient, auth, course_setup) -> None:
        response = client.get(f"/api/v1/courses/{course_setup.id}", headers=auth(3))

        assert response.status_code == 200
        assert response.json()["organization_path"] == "dat320"

    def test_get_missing_course(self, client: TestClient, auth, course_setup) -> None:
        response = client.get("/api/v1/courses/77", headers=auth(3))

        assert response.status_code == 404
        assert response.json() == {"detail": "Course 77 not found"}

    def test_update_requires_teacher(self, client: TestClient, auth, course_setup, enroll) -> None:
        enroll(2, EnrollmentStatus.STUDENT)
        body = {"name": "OS", "code": "DAT320", "year": 2026}

        assert client.put("/api/v1/courses/1", json=body, headers=auth(2)).status_code == 403
        assert client.put("/api/v1/courses/1", json=body, headers=auth(1)).json()["year"] == 2026

    def test_providers(self, client: TestClient, auth, course_setup) -> None:
        response = client.get("/api/v1/courses/providers", headers=auth(3))

        assert response.json() == {"providers": ["github"]}

    def test_no_providers(self, client: TestClient, auth, scm_factory, course_setup) -> None:
        scm_factory.settings = SCMSettings(enabled_providers="")

        assert client.get("/api/v1/courses/providers", headers=auth(3)).status_code == 404

    def test_organizations(self, client: TestClient, auth, scm, course_setup) -> None:
        scm.add_directory("free-org", directory_id=8)

        response = client.get("/api/v1/courses/organizations?provider=github", headers=auth(1))

        assert response.json() == [{"id": 8, "path": "free-org", "avatar_url": ""}]

    def test_organizations_timeout(self, client: TestClient, auth, scm, scm_factory, course_setup) -> None:
        scm_factory.settings = SCMSettings(enabled_providers="github", max_wait=0.01)
        scm.list_delay = 0.5

        response = client.get("/api/v1/courses/organizations?provider=github", headers=auth(1))

        assert response.status_code == 500
        assert response.json() == {"detail": GENERIC_SERVER_ERROR}

    def test_organizations_unexpected_payload(self, app, auth, scm, monkeypatch, course_setup) -> None:
        async def broken_listing() -> list:
            raise KeyError("login")

        monkeypatch.setattr(scm, "list_directories", broken_listing)
        client = TestClient(app, raise_server_exceptions=False)

        response = client.get("/api/v1/courses/organizations?provider=github", headers=auth(1))

        assert response.status_code == 500
        assert response.json() == {"detail": GENERIC_SERVER_ERROR}


class TestAssignmentsAPI:
    """Tests for refresh and assignment listing."""

    def test_refresh_and_list(self, client: TestClient, auth, scm, course_setup, enroll) -> None:
        enroll(2, EnrollmentStatus.STUDENT)
        scm.add_file(
            "dat320",
            "tests",
            "lab1/assignment.yml",
            'assignmentid: 1\nname: "Lab 1"\nlanguage: go\ndeadline: "01-09-2024 23:59"\n',
        )

        refreshed = client.post("/api/v1/courses/1/refresh", headers=auth(1))
        listed = client.get("/api/v1/courses/1/assignments", headers=auth(2))

        assert refreshed.status_code == 200
        assert listed.json() == refreshed.json()
        assert listed.json()[0]["deadline"] == "2024-09-01T23:59:00"

    def test_refresh_with_invalid_descriptor(self, client: TestClient, auth, scm, course_setup) -> None:
        scm.add_file("dat320", "tests", "lab1/assignment.yml", "assignmentid: -3\ndeadline: x\n")

        response = client.post("/api/v1/courses/1/refresh", headers=auth(1))

        assert response.status_code == 400

    def test_assignments_require_enrollment(self, client: TestClient, auth, course_setup, enroll) -> None:
        enroll(2, EnrollmentStatus.PENDING)

        assert client.get("/api/v1/courses/1/assignments", headers=auth(2)).status_code == 403

    @pytest.mark.parametrize(("repo_type", "status"), [("tests", 200), ("solutions", 404), ("bogus", 422)])
    def test_repository_url(
        self, client: TestClient, auth, storage, course_setup, repo_type: str, status: int
    ) -> None:
        storage.seed(
            Repository(
                repository_id=300,
                directory_id=course_setup.directory_id,
                html_url="https://scm.example.com/dat320/tests",
                repo_type="tests",
                user_id=None,
                group_id=None,
            )
        )

        response = client.get(f"/api/v1/courses/1/repositories/{repo_type}", headers=auth(1))

        assert response.status_code == status
