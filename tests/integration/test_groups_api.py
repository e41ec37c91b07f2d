# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for group endpoints."""

import pytest
from fastapi.testclient import TestClient

from quickfeed.infrastructure.database.models import EnrollmentStatus, Group


@pytest.fixture
def students(enroll):
    """Enroll alice (2), bob (3) and carol (4) as students."""
    for user_id in (2, 3, 4):
        enroll(user_id, EnrollmentStatus.STUDENT)


@pytest.fixture
def group_id(client: TestClient, auth, students) -> int:
    """Create a group of alice and bob through the API."""
    response = client.post(
        "/api/v1/courses/1/groups",
        json={"name": "team-a", "user_ids": [2, 3]},
        headers=auth(2),
    )
    assert response.status_code == 201
    return response.json()["id"]


class TestGroupsAPI:
    """Tests for /api/v1/courses/{course_id}/groups."""

    def test_create(self, client: TestClient, auth, group_id: int) -> None:
        response = client.get(f"/api/v1/courses/1/groups/{group_id}", headers=auth(3))

        assert response.json() == {
            "id": group_id,
            "course_id": 1,
            "name": "team-a",
            "status": "pending",
            "user_ids": [2, 3],
        }

    def test_duplicate_name(self, client: TestClient, auth, group_id: int) -> None:
        response = client.post(
            "/api/v1/courses/1/groups",
            json={"name": "team-a", "user_ids": [4]},
            headers=auth(4),
        )

        assert response.status_code == 409

    def test_create_for_others(self, client: TestClient, auth, students) -> None:
        response = client.post(
            "/api/v1/courses/1/groups",
            json={"name": "team-b", "user_ids": [2, 3]},
            headers=auth(4),
        )

        assert response.status_code == 403

    def test_non_member_cannot_read(self, client: TestClient, auth, group_id: int) -> None:
        assert client.get(f"/api/v1/courses/1/groups/{group_id}", headers=auth(4)).status_code == 403
        assert client.get(f"/api/v1/courses/1/groups/{group_id}", headers=auth(1)).status_code == 200

    def test_group_of_other_course(self, client: TestClient, auth, storage, students) -> None:
        group = Group(course_id=2, name="elsewhere", status="pending")
        storage.seed(group)

        response = client.get(f"/api/v1/courses/1/groups/{group.id}", headers=auth(1))

        assert response.status_code == 404

    def test_group_of_user(self, client: TestClient, auth, group_id: int) -> None:
        assert client.get("/api/v1/courses/1/users/3/group", headers=auth(3)).json()["id"] == group_id
        assert client.get("/api/v1/courses/1/users/3/group", headers=auth(4)).status_code == 403
        assert client.get("/api/v1/courses/1/users/4/group", headers=auth(4)).status_code == 404

    def test_approve(self, client: TestClient, auth, scm, group_id: int) -> None:
        response = client.put(
            f"/api/v1/courses/1/groups/{group_id}",
            json={"status": "approved"},
            headers=auth(1),
        )

        assert response.status_code == 200
        assert response.json()["status"] == "approved"
        assert "team-a" in scm.repository_paths(scm.directories[7])

    def test_students_cannot_approve(self, client: TestClient, auth, group_id: int) -> None:
        response = client.put(
            f"/api/v1/courses/1/groups/{group_id}",
            json={"status": "approved"},
            headers=auth(2),
        )

        assert response.status_code == 403

    def test_list_and_delete(self, client: TestClient, auth, storage, group_id: int) -> None:
        listed = client.get("/api/v1/courses/1/groups", headers=auth(1))
        deleted = client.delete(f"/api/v1/courses/1/groups/{group_id}", headers=auth(1))

        assert [g["name"] for g in listed.json()] == ["team-a"]
        assert deleted.status_code == 204
        assert storage.all(Group) == []
