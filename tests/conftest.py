"""Shared fixtures: an in-memory database and helpers for users and logins."""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SEED_DEMO_DATA"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["JWT_SECRET"] = "test-jwt-secret-with-enough-length-for-hs256"

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Query

from app import app as flask_app
from auth import hash_password
from models import User, db


@pytest.fixture
def app():
    flask_app.config.update(TESTING=True)
    with flask_app.app_context():
        db.drop_all()
        db.create_all()
    yield flask_app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    """Create a user and return its id."""

    def _make(name="Arjun Menon", email="arjun@example.com", role="employee",
              employee_id="RW/0001", password="secret"):
        with app.app_context():
            user = User(
                name=name,
                email=email,
                role=role,
                employee_id=employee_id,
                password_hash=hash_password(password),
            )
            db.session.add(user)
            db.session.commit()
            return user.id

    return _make


@pytest.fixture
def employee(make_user):
    return make_user()


@pytest.fixture
def lead(make_user):
    return make_user(name="Meera Nair", email="meera@example.com", role="lead", employee_id="RW/1950")


@pytest.fixture
def broken_queries(monkeypatch):
    """Make every ORM query listing fail as if the database went away."""

    def _fail(self):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    monkeypatch.setattr(Query, "all", _fail)


def login(client, email, password="secret"):
    return client.post("/login", data={"email": email, "password": password})


def api_token(client, email, password="secret"):
    resp = client.post("/api/auth/login", json={"email": email, "password": password})
    return resp.get_json()["token"]


def bearer(token):
    return {"Authorization": "Bearer %s" % token}
