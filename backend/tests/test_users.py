from fastapi.testclient import TestClient

from app import models
from app.auth import create_token
from app.main import app


def test_list_users_hides_password_hashes(admin_client, make_user):
    make_user(email="student@example.com")
    r = admin_client.get("/api/admin/users")
    assert r.status_code == 200
    users = r.json()["users"]
    assert {u["email"] for u in users} == {"admin@example.com", "student@example.com"}
    assert all("password_hash" not in u for u in users)


def test_promote_and_demote_user(admin_client, make_user):
    user, token = make_user(email="student@example.com")
    r = admin_client.patch(f"/api/admin/users/{user.id}", json={"role": "admin"})
    assert r.status_code == 200
    assert r.json()["user"]["role"] == "admin"

    # the same cookie now reaches admin routes
    promoted = TestClient(app, cookies={"token": token})
    assert promoted.get("/api/admin/users").status_code == 200

    r = admin_client.patch(f"/api/admin/users/{user.id}", json={"role": "standard"})
    assert r.status_code == 200
    assert r.json()["user"]["role"] == "standard"


def test_role_update_validation(admin_client, make_user):
    user, _ = make_user(email="student@example.com")
    r = admin_client.patch(f"/api/admin/users/{user.id}", json={"role": "owner"})
    assert r.status_code == 400
    assert r.json()["message"] == "Role must be either 'standard' or 'admin'."

    r = admin_client.patch("/api/admin/users/9999", json={"role": "admin"})
    assert r.status_code == 400
    assert r.json()["message"] == "No User with this ID exists."


def test_admin_cannot_change_or_delete_self(make_user):
    admin, token = make_user(email="root@example.com", role=models.ROLE_ADMIN)
    client = TestClient(app, cookies={"token": token})
    r = client.patch(f"/api/admin/users/{admin.id}", json={"role": "standard"})
    assert r.status_code == 400
    assert r.json()["message"] == "You cannot change your own role."
    r = client.delete(f"/api/admin/users/{admin.id}")
    assert r.status_code == 400


def test_delete_user(admin_client, make_user):
    user, _ = make_user(email="student@example.com")
    r = admin_client.delete(f"/api/admin/users/{user.id}")
    assert r.status_code == 200
    assert admin_client.get(f"/api/admin/users/{user.id}").status_code == 400
