from conftest import ADMIN_PASSWORD, ADMIN_USERNAME, add
from extensions import revoke_token, revoked_tokens
from models import AdminCredential


def test_login_returns_user_and_token(client, admin):
    resp = client.post("/auth/login", json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD})
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["user"] == {"id": admin.id, "username": ADMIN_USERNAME}
    assert body["access_token"]


def test_wrong_password_and_unknown_user_look_the_same(client, admin):
    bad_password = client.post("/auth/login", json={"username": ADMIN_USERNAME, "password": "nope"})
    unknown_user = client.post("/auth/login", json={"username": "ghost", "password": ADMIN_PASSWORD})
    assert bad_password.status_code == unknown_user.status_code == 401
    assert bad_password.get_json() == unknown_user.get_json() == {"message": "Invalid credentials"}


def test_plaintext_stored_password_is_rejected(client, app):
    add(AdminCredential(username="legacy", password_hash="plain-secret"))
    resp = client.post("/auth/login", json={"username": "legacy", "password": "plain-secret"})
    assert resp.status_code == 401


def test_missing_fields(client):
    assert client.post("/auth/login", json={}).status_code == 401


def test_protected_route_without_token_redirects_to_login(client):
    resp = client.get("/admin/tours")
    assert resp.status_code == 401
    assert resp.get_json()["redirect"] == "/admin-login?redirect=%2Fadmin%2Ftours"


def test_invalid_token(client):
    resp = client.get("/admin/tours", headers={"Authorization": "Bearer not-a-token"})
    assert resp.status_code == 401
    assert resp.get_json()["redirect"].startswith("/admin-login?redirect=")


def test_me_and_verify(client, auth_headers):
    me = client.get("/auth/me", headers=auth_headers)
    assert me.status_code == 200
    assert me.get_json()["user"]["username"] == ADMIN_USERNAME

    verify = client.get("/auth/verify", headers=auth_headers)
    assert verify.get_json()["valid"] is True


def test_logout_revokes_token(client, auth_headers):
    assert client.post("/auth/logout", headers=auth_headers).status_code == 200
    resp = client.get("/auth/me", headers=auth_headers)
    assert resp.status_code == 401
    assert "redirect" in resp.get_json()


def test_logout_keeps_jti_until_it_expires(client, auth_headers):
    client.post("/auth/logout", headers=auth_headers)
    [(jti, exp)] = revoked_tokens.items()

    revoke_token("otro", exp + 60, now=exp - 1)
    assert set(revoked_tokens) == {jti, "otro"}

    revoke_token("nuevo", exp + 120, now=exp + 1)
    assert set(revoked_tokens) == {"otro", "nuevo"}
