import asyncio

import pytest
from fastapi.testclient import TestClient

from app import gate, models
from app.auth import Identity, create_token
from app.gate import GateDecision, decide, is_under
from app.main import app

ADMIN = Identity(user_id=1, name="Admin", email="admin@example.com", role="admin")
STANDARD = Identity(user_id=2, name="Student", email="student@example.com", role="standard")


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("/login", GateDecision.allow()),
        ("/registration", GateDecision.allow()),
        ("/api/login", GateDecision.allow()),
        ("/api/jwt/verify-token", GateDecision.allow()),
        ("/health", GateDecision.allow()),
        ("/", GateDecision.redirect("/login")),
        ("/user/lessons", GateDecision.redirect("/login")),
        ("/api/admin/lessons", GateDecision.redirect("/login")),
        ("/loginx", GateDecision.redirect("/login")),
    ],
)
def test_anonymous_routing(path, expected):
    assert decide(path, None) == expected


def test_signed_in_root_goes_to_role_landing_page():
    assert decide("/", ADMIN) == GateDecision.redirect("/admin/dashboard")
    assert decide("/", STANDARD) == GateDecision.redirect("/user/lessons")
    assert decide("/login", STANDARD) == GateDecision.redirect("/user/lessons")


@pytest.mark.parametrize(
    ("path", "identity", "action"),
    [
        ("/api/admin/words", ADMIN, "allow"),
        ("/admin/dashboard", ADMIN, "allow"),
        ("/api/user/lessons", ADMIN, "reject"),
        ("/user/tutorials", ADMIN, "reject"),
        ("/api/user/lessons/3", STANDARD, "allow"),
        ("/api/admin/lessons", STANDARD, "reject"),
        ("/admin", STANDARD, "reject"),
        ("/administrator", STANDARD, "allow"),
        ("/api/logout", STANDARD, "allow"),
    ],
)
def test_role_prefixes(path, identity, action):
    assert decide(path, identity).action == action


def test_is_under_is_segment_aware():
    assert is_under("/admin", "/admin")
    assert is_under("/admin/users", "/admin")
    assert not is_under("/admins", "/admin")


def test_anonymous_request_redirected_to_login(anon_client):
    r = anon_client.get("/api/user/lessons", follow_redirects=False)
    assert r.status_code == 307
    assert r.headers["location"] == "/login"


def test_admin_rejected_from_user_api(admin_client):
    r = admin_client.get("/api/user/lessons", follow_redirects=False)
    assert r.status_code == 401
    assert r.json() == {"message": "Unauthorized"}


def test_standard_user_rejected_from_admin_api(user_client):
    r = user_client.get("/api/admin/lessons", follow_redirects=False)
    assert r.status_code == 401


def test_admin_root_redirects_to_dashboard(admin_client):
    r = admin_client.get("/", follow_redirects=False)
    assert r.status_code == 307
    assert r.headers["location"] == "/admin/dashboard"


def test_allowed_request_carries_identity_headers(user_client):
    r = user_client.get("/api/user/lessons")
    assert r.status_code == 200
    assert r.headers["X-User-Logged-In"] == "true"
    assert r.headers["X-User-Role"] == "standard"
    assert r.headers["X-Current-Pathname"] == "/api/user/lessons"


def test_invalid_or_expired_token_is_anonymous(make_user):
    user, _ = make_user()
    expired = create_token(user, expires_minutes=-1)
    for token in ("not-a-token", expired):
        client = TestClient(app, cookies={"token": token})
        r = client.get("/api/user/lessons", follow_redirects=False)
        assert r.status_code == 307
        assert r.headers["location"] == "/login"


def test_token_of_deleted_user_is_anonymous(make_user, db):
    user, token = make_user()
    db.delete(user)
    db.commit()
    client = TestClient(app, cookies={"token": token})
    r = client.get("/api/user/lessons", follow_redirects=False)
    assert r.status_code == 307


def test_promoted_role_takes_effect_without_new_token(make_user, db):
    user, token = make_user()
    user.role = models.ROLE_ADMIN
    db.add(user)
    db.commit()
    client = TestClient(app, cookies={"token": token})
    assert client.get("/api/admin/lessons").status_code == 200


def test_identity_lookup_runs_off_the_event_loop(anon_client, monkeypatch):
    on_loop = []

    def fake_resolve(token):
        try:
            asyncio.get_running_loop()
            on_loop.append(True)
        except RuntimeError:
            on_loop.append(False)
        return None

    monkeypatch.setattr(gate, "resolve_identity", fake_resolve)
    r = anon_client.get("/health")
    assert r.status_code == 200
    assert on_loop == [False]
