from app.models.user import UserRole


def test_read_me(client, analyst, headers_for):
    response = client.get("/api/users/me", headers=headers_for(analyst))
    assert response.status_code == 200
    assert response.json()["user"]["id"] == analyst.id


def test_update_me_changes_name(client, analyst, headers_for):
    response = client.patch("/api/users/me", json={"name": "Renamed"}, headers=headers_for(analyst))
    assert response.status_code == 200
    assert response.json()["user"]["name"] == "Renamed"


def test_list_users_requires_view_reports(client, analyst, sme, headers_for):
    assert client.get("/api/users", headers=headers_for(analyst)).status_code == 403
    assert client.get("/api/users", headers=headers_for(sme)).status_code == 403


def test_manager_lists_users_by_role(client, manager, analyst, sme, headers_for):
    response = client.get("/api/users", headers=headers_for(manager))
    assert response.status_code == 200
    assert len(response.json()["users"]) == 3

    response = client.get("/api/users", params={"role": "sme"}, headers=headers_for(manager))
    assert [user["id"] for user in response.json()["users"]] == [sme.id]


def test_list_users_rejects_unknown_role(client, manager, headers_for):
    response = client.get("/api/users", params={"role": "owner"}, headers=headers_for(manager))
    assert response.status_code == 400
    assert response.json()["code"] == "BAD_REQUEST"


def test_get_user_not_found(client, manager, headers_for):
    response = client.get("/api/users/missing", headers=headers_for(manager))
    assert response.status_code == 404


def test_admin_changes_role(client, admin, analyst, headers_for):
    response = client.patch(
        f"/api/users/{analyst.id}/role", json={"role": "sme"}, headers=headers_for(admin)
    )
    assert response.status_code == 200
    user = response.json()["user"]
    assert user["role"] == "sme"
    assert "validate:ai" in user["permissions"]


def test_manager_cannot_change_role(client, manager, analyst, headers_for):
    response = client.patch(
        f"/api/users/{analyst.id}/role", json={"role": "admin"}, headers=headers_for(manager)
    )
    assert response.status_code == 403


def test_role_update_rejects_unknown_role(client, make_user, headers_for):
    admin = make_user(UserRole.ADMIN)
    target = make_user(UserRole.ANALYST)
    response = client.patch(
        f"/api/users/{target.id}/role", json={"role": "superuser"}, headers=headers_for(admin)
    )
    assert response.status_code == 400
