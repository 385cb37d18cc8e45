import pytest
from fastapi import status


def _create_project(client, headers, member_ids):
    response = client.post("/api/projects", headers=headers, json={
        "name": "HRMS rollout",
        "description": "Roll out the new HR system",
        "member_ids": member_ids,
    })
    assert response.status_code == status.HTTP_201_CREATED, response.json()
    return response.json()["data"]


def _add_task(client, headers, project_id, assignee_id):
    response = client.post(f"/api/projects/{project_id}/tasks", headers=headers, json={
        "title": "Import employee data",
        "assigned_to": assignee_id,
    })
    assert response.status_code == status.HTTP_201_CREATED, response.json()
    return response.json()["data"]["tasks"][-1]


def test_admin_creates_project_with_members(client, admin_user, employee_user, auth_headers):
    project = _create_project(client, auth_headers(admin_user), [employee_user.id])
    assert project["status"] == "active"
    assert project["member_ids"] == [employee_user.id]
    assert project["created_by"] == admin_user.id


def test_employee_cannot_create_project(client, employee_user, auth_headers):
    response = client.post("/api/projects", headers=auth_headers(employee_user), json={
        "name": "x", "description": "y",
    })
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_members_see_only_their_projects(client, admin_user, employee_user, other_employee, auth_headers):
    _create_project(client, auth_headers(admin_user), [employee_user.id])
    assert len(client.get("/api/projects", headers=auth_headers(employee_user)).json()["data"]) == 1
    assert client.get("/api/projects", headers=auth_headers(other_employee)).json()["data"] == []


def test_assignee_moves_task_but_cannot_rename_it(client, admin_user, employee_user, auth_headers):
    project = _create_project(client, auth_headers(admin_user), [employee_user.id])
    task = _add_task(client, auth_headers(admin_user), project["id"], employee_user.id)

    response = client.patch(
        f"/api/projects/{project['id']}/tasks/{task['id']}",
        headers=auth_headers(employee_user),
        json={"status": "In Progress", "title": "renamed"},
    )
    assert response.status_code == 200
    updated = response.json()["data"]["tasks"][0]
    assert updated["status"] == "in_progress"
    assert updated["title"] == "Import employee data"


def test_non_assignee_cannot_touch_task(client, admin_user, employee_user, other_employee, auth_headers):
    project = _create_project(client, auth_headers(admin_user), [employee_user.id, other_employee.id])
    task = _add_task(client, auth_headers(admin_user), project["id"], employee_user.id)
    response = client.patch(
        f"/api/projects/{project['id']}/tasks/{task['id']}",
        headers=auth_headers(other_employee),
        json={"status": "done"},
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_admin_puts_project_on_hold(client, admin_user, auth_headers):
    project = _create_project(client, auth_headers(admin_user), [])
    response = client.patch(
        f"/api/projects/{project['id']}", headers=auth_headers(admin_user), json={"status": "on-hold"}
    )
    assert response.json()["data"]["status"] == "on_hold"


def test_missing_task_is_not_found(client, admin_user, auth_headers):
    project = _create_project(client, auth_headers(admin_user), [])
    response = client.patch(
        f"/api/projects/{project['id']}/tasks/5555", headers=auth_headers(admin_user), json={"status": "done"}
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.parametrize("field", ["name", "description", "status"])
def test_null_required_project_field_is_rejected(client, admin_user, auth_headers, field):
    project = _create_project(client, auth_headers(admin_user), [])
    response = client.patch(
        f"/api/projects/{project['id']}", headers=auth_headers(admin_user), json={field: None}
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    unchanged = client.get("/api/projects", headers=auth_headers(admin_user)).json()["data"][0]
    assert unchanged[field] == project[field]


@pytest.mark.parametrize("field", ["title", "status"])
def test_null_required_task_field_is_rejected(client, admin_user, employee_user, auth_headers, field):
    project = _create_project(client, auth_headers(admin_user), [employee_user.id])
    task = _add_task(client, auth_headers(admin_user), project["id"], employee_user.id)
    response = client.patch(
        f"/api/projects/{project['id']}/tasks/{task['id']}",
        headers=auth_headers(admin_user),
        json={field: None},
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_admin_removes_task(client, admin_user, employee_user, auth_headers):
    project = _create_project(client, auth_headers(admin_user), [employee_user.id])
    task = _add_task(client, auth_headers(admin_user), project["id"], employee_user.id)
    kept = _add_task(client, auth_headers(admin_user), project["id"], employee_user.id)

    response = client.delete(
        f"/api/projects/{project['id']}/tasks/{task['id']}", headers=auth_headers(admin_user)
    )
    assert response.status_code == 200
    assert [t["id"] for t in response.json()["data"]["tasks"]] == [kept["id"]]


def test_assignee_cannot_remove_task(client, admin_user, employee_user, auth_headers):
    project = _create_project(client, auth_headers(admin_user), [employee_user.id])
    task = _add_task(client, auth_headers(admin_user), project["id"], employee_user.id)
    response = client.delete(
        f"/api/projects/{project['id']}/tasks/{task['id']}", headers=auth_headers(employee_user)
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN

    tasks = client.get("/api/projects", headers=auth_headers(employee_user)).json()["data"][0]["tasks"]
    assert len(tasks) == 1


def test_removing_missing_task_is_not_found(client, admin_user, auth_headers):
    project = _create_project(client, auth_headers(admin_user), [])
    response = client.delete(
        f"/api/projects/{project['id']}/tasks/5555", headers=auth_headers(admin_user)
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND
