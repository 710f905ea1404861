import pytest

from app import create_app
from config import TestConfig
from extensions import db, bcrypt, revoked_tokens
from models import AdminCredential

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "roatan-2024"


@pytest.fixture
def app(tmp_path):
    class Config(TestConfig):
        UPLOAD_FOLDER = str(tmp_path / "uploads")

    app = create_app(Config)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()
    revoked_tokens.clear()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin(app):
    cred = AdminCredential(
        username=ADMIN_USERNAME,
        password_hash=bcrypt.generate_password_hash(ADMIN_PASSWORD).decode("utf-8"),
    )
    db.session.add(cred)
    db.session.commit()
    return cred


@pytest.fixture
def token(client, admin):
    resp = client.post(
        "/auth/login",
        json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD},
    )
    assert resp.status_code == 200
    return resp.get_json()["access_token"]


@pytest.fixture
def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


def add(*objs):
    for obj in objs:
        db.session.add(obj)
    db.session.commit()
    return objs[0] if len(objs) == 1 else objs
