from fastapi import status

from perfdesk.models.kpi import KPI, KpiStatus


def _create_kpi(client, headers, **overrides):
    body = {
        "kpi_name": "Field visits",
        "metric": "visits",
        "target": 100,
        "achieved_value": 50,
        "weightage": 20,
        "period": "Q1",
    }
    body.update(overrides)
    response = client.post("/api/kpi", headers=headers, json=body)
    assert response.status_code == status.HTTP_201_CREATED, response.json()
    return response.json()["data"]


def test_create_kpi_reports_progress_on_read_back(client, employee_user, auth_headers):
    headers = auth_headers(employee_user)
    kpi = _create_kpi(client, headers)

    response = client.get(f"/api/kpi/{kpi['id']}", headers=headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["progress"] == 50
    assert data["assigned_to"] == employee_user.id
    assert data["assigned_by"] is None
    assert data["status"] == "not_started"


def test_owner_update_recomputes_progress_and_score(client, employee_user, auth_headers):
    headers = auth_headers(employee_user)
    kpi = _create_kpi(client, headers)

    response = client.patch(
        f"/api/kpi/{kpi['id']}",
        headers=headers,
        json={"achieved_value": 90, "status": "Completed", "progress_notes": "done"},
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "completed"
    assert data["progress"] == 90
    assert data["score"] == 90
    assert data["progress_notes"] == "done"
    assert data["last_updated"] is not None


def test_score_is_not_set_before_completion(client, employee_user, auth_headers):
    headers = auth_headers(employee_user)
    kpi = _create_kpi(client, headers)
    response = client.patch(f"/api/kpi/{kpi['id']}", headers=headers, json={"achieved_value": 70})
    data = response.json()["data"]
    assert data["progress"] == 70
    assert data["score"] == 0


def test_owner_cannot_set_admin_fields(client, employee_user, auth_headers):
    headers = auth_headers(employee_user)
    kpi = _create_kpi(client, headers)

    response = client.patch(
        f"/api/kpi/{kpi['id']}",
        headers=headers,
        json={"supervisor_comments": "self praise", "target": 10},
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["supervisor_comments"] is None
    assert data["target"] == 100


def test_non_owner_update_is_forbidden_and_leaves_record_unchanged(
    client, db_session, employee_user, other_employee, auth_headers
):
    kpi = _create_kpi(client, auth_headers(employee_user))

    response = client.patch(
        f"/api/kpi/{kpi['id']}",
        headers=auth_headers(other_employee),
        json={"achieved_value": 1, "status": "at_risk"},
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["success"] is False

    stored = db_session.get(KPI, kpi["id"])
    assert stored.achieved_value == 50
    assert stored.status == KpiStatus.NOT_STARTED


def test_admin_update_sets_supervisor_comments(client, admin_user, employee_user, auth_headers):
    kpi = _create_kpi(client, auth_headers(employee_user))
    response = client.patch(
        f"/api/kpi/{kpi['id']}",
        headers=auth_headers(admin_user),
        json={"supervisor_comments": "Keep it up", "target": 200},
    )
    data = response.json()["data"]
    assert data["supervisor_comments"] == "Keep it up"
    assert data["target"] == 200
    assert data["progress"] == 25


def test_admin_assigns_kpi_to_employee(client, admin_user, employee_user, auth_headers):
    kpi = _create_kpi(client, auth_headers(admin_user), assigned_to=employee_user.id)
    assert kpi["assigned_to"] == employee_user.id
    assert kpi["assigned_by"] == admin_user.id


def test_employee_cannot_assign_kpi_to_someone_else(client, employee_user, other_employee, auth_headers):
    response = client.post(
        "/api/kpi",
        headers=auth_headers(employee_user),
        json={"kpi_name": "x", "metric": "y", "target": 1, "assigned_to": other_employee.id},
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_list_is_scoped_to_owner_for_non_admins(client, admin_user, employee_user, other_employee, auth_headers):
    _create_kpi(client, auth_headers(employee_user), kpi_name="mine")
    _create_kpi(client, auth_headers(other_employee), kpi_name="theirs")

    # Asking for someone else's KPIs still returns only your own
    response = client.get(
        f"/api/kpi?owner_id={other_employee.id}", headers=auth_headers(employee_user)
    )
    names = [k["kpi_name"] for k in response.json()["data"]]
    assert names == ["mine"]

    response = client.get("/api/kpi", headers=auth_headers(admin_user))
    assert len(response.json()["data"]) == 2

    response = client.get(f"/api/kpi?owner_id={other_employee.id}", headers=auth_headers(admin_user))
    assert [k["kpi_name"] for k in response.json()["data"]] == ["theirs"]


def test_list_is_newest_first(client, employee_user, auth_headers):
    headers = auth_headers(employee_user)
    _create_kpi(client, headers, kpi_name="first")
    _create_kpi(client, headers, kpi_name="second")
    response = client.get("/api/kpi", headers=headers)
    assert [k["kpi_name"] for k in response.json()["data"]] == ["second", "first"]


def test_get_other_users_kpi_is_forbidden(client, employee_user, other_employee, auth_headers):
    kpi = _create_kpi(client, auth_headers(employee_user))
    response = client.get(f"/api/kpi/{kpi['id']}", headers=auth_headers(other_employee))
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_put_is_admin_only(client, admin_user, employee_user, auth_headers):
    kpi = _create_kpi(client, auth_headers(employee_user))
    response = client.put(
        f"/api/kpi/{kpi['id']}", headers=auth_headers(employee_user), json={"target": 10}
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN

    response = client.put(
        f"/api/kpi/{kpi['id']}", headers=auth_headers(admin_user), json={"target": 50, "status": "completed"}
    )
    data = response.json()["data"]
    assert data["progress"] == 100
    assert data["score"] == 100


def test_put_rejects_fields_outside_the_kpi(client, admin_user, employee_user, auth_headers):
    kpi = _create_kpi(client, auth_headers(employee_user))
    response = client.put(
        f"/api/kpi/{kpi['id']}", headers=auth_headers(admin_user), json={"assigned_to": admin_user.id}
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST

    unchanged = client.get(f"/api/kpi/{kpi['id']}", headers=auth_headers(admin_user)).json()["data"]
    assert unchanged["assigned_to"] == employee_user.id


def test_delete_requires_admin(client, employee_user, auth_headers):
    kpi = _create_kpi(client, auth_headers(employee_user))
    response = client.delete(f"/api/kpi/{kpi['id']}", headers=auth_headers(employee_user))
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_admin_deletes_kpi(client, db_session, admin_user, employee_user, auth_headers):
    kpi = _create_kpi(client, auth_headers(employee_user))
    response = client.delete(f"/api/kpi/{kpi['id']}", headers=auth_headers(admin_user))
    assert response.status_code == 200
    assert response.json()["success"] is True
    assert db_session.get(KPI, kpi["id"]) is None


def test_delete_missing_kpi_is_not_found(client, admin_user, auth_headers):
    response = client.delete("/api/kpi/999999", headers=auth_headers(admin_user))
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["error"]["code"] == "NOT_FOUND"


def test_patch_missing_kpi_is_not_found(client, employee_user, auth_headers):
    response = client.patch("/api/kpi/424242", headers=auth_headers(employee_user), json={"achieved_value": 1})
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_invalid_weightage_is_a_validation_error(client, employee_user, auth_headers):
    response = client.post(
        "/api/kpi",
        headers=auth_headers(employee_user),
        json={"kpi_name": "x", "metric": "y", "target": 10, "weightage": 150},
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    body = response.json()
    assert body["error"]["code"] == "VALIDATION_ERROR"
    assert body["error"]["details"]["errors"][0]["field"] == "weightage"


def test_unknown_status_is_a_validation_error(client, employee_user, auth_headers):
    kpi = _create_kpi(client, auth_headers(employee_user))
    response = client.patch(
        f"/api/kpi/{kpi['id']}", headers=auth_headers(employee_user), json={"status": "archived"}
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
