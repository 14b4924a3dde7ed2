from artistry import db
from artistry.models import User
from artistry.seed import ensure_admin

from .conftest import ADMIN


def _session_cookies(resp):
    return [c for c in resp.headers.getlist("Set-Cookie") if c.startswith("artistry.sid=")]


def test_login_with_wrong_password_sets_no_session(app, client):
    with app.app_context():
        ensure_admin(ADMIN["username"], ADMIN["password"])

    resp = client.post("/api/auth/login", json={"username": ADMIN["username"], "password": "wrong"})
    assert resp.status_code == 401
    assert resp.get_json() == {"error": "Invalid credentials"}
    assert _session_cookies(resp) == []
    assert client.get("/api/auth/me").status_code == 401


def test_login_returns_user_and_sets_session(app, client):
    with app.app_context():
        user, _ = ensure_admin(ADMIN["username"], ADMIN["password"])
        user_id = user.id

    resp = client.post("/api/auth/login", json=ADMIN)
    assert resp.status_code == 200
    assert resp.get_json() == {"id": user_id, "username": ADMIN["username"], "isAdmin": True}
    assert len(_session_cookies(resp)) == 1

    me = client.get("/api/auth/me").get_json()
    assert me == {"userId": user_id, "username": ADMIN["username"], "isAdmin": True}


def test_login_requires_both_fields(client):
    resp = client.post("/api/auth/login", json={"username": "maya"})
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Username and password are required"}


def test_unknown_user_is_401(client):
    assert client.post("/api/auth/login", json={"username": "ghost", "password": "x"}).status_code == 401


def test_register_creates_a_regular_user(app, client):
    resp = client.post("/api/auth/register", json={"username": "priya", "password": "painting123", "isAdmin": True})
    assert resp.status_code == 201
    assert resp.get_json()["isAdmin"] is False
    assert client.get("/api/auth/me").get_json()["username"] == "priya"

    with app.app_context():
        user = User.query.filter_by(username="priya").one()
        assert user.password != "painting123"
        assert user.password.startswith("$2")


def test_register_rejects_duplicate_usernames(client, user_client):
    resp = client.post("/api/auth/register", json={"username": "priya", "password": "another-one"})
    assert resp.status_code == 409


def test_register_validates_input(client):
    resp = client.post("/api/auth/register", json={"username": "ab", "password": "123"})
    assert resp.status_code == 400
    assert {d["path"] for d in resp.get_json()["details"]} == {"username", "password"}


def test_password_is_never_serialized(app):
    with app.app_context():
        user, _ = ensure_admin("owner", "owner-pass")
        assert "password" not in user.to_dict()


def test_logout_ends_the_session(admin_client):
    assert admin_client.get("/api/orders").status_code == 200
    resp = admin_client.post("/api/auth/logout")
    assert resp.get_json() == {"success": True}
    assert admin_client.get("/api/orders").status_code == 401
    assert admin_client.get("/api/auth/me").status_code == 401


def test_regular_user_is_not_admin(user_client):
    assert user_client.get("/api/auth/me").get_json()["isAdmin"] is False
    assert user_client.get("/api/orders").status_code == 401
    assert user_client.get("/api/contacts").status_code == 401


def test_tampered_cookie_is_ignored(app, admin_client):
    tampered = app.test_client()
    tampered.set_cookie("artistry.sid", "forged-session-id.bad-signature")
    assert tampered.get("/api/orders").status_code == 401


def test_promoting_an_existing_user(app, user_client):
    with app.app_context():
        user, created = ensure_admin("priya", "new-password")
        assert created is False
        assert db.session.get(User, user.id).is_admin is True


def test_login_body_must_be_an_object(client):
    for body in (["maya", "studio-secret"], "maya"):
        resp = client.post("/api/auth/login", json=body)
        assert resp.status_code == 400
        assert resp.get_json() == {"error": "Username and password are required"}
