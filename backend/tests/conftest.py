"""Pytest fixtures building a fresh application and schema per test.

Every test gets its own in-memory SQLite database: services commit through
their Unit of Work, so rollback-based isolation would not hold.
"""

from __future__ import annotations

import os

import pytest
from authcore.core.extensions import db as _db  # Flask-SQLAlchemy instance
from authcore.factory import create_app  # application factory under test

ACCESS_SECRET = "test-access-secret-0123456789abcdefghij"
REFRESH_SECRET = "test-refresh-secret-0123456789abcdefghij"


class TestConfig:
    """Testing configuration for creating the Flask app.

    Notes
    -----
    - Uses an in-memory SQLite database for speed.
    - Ships two distinct, long-enough signing secrets.
    - Avoids hitting external services.
    """

    TESTING = True
    DEBUG = False
    SECRET_KEY = "test"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JWT_ACCESS_SECRET = ACCESS_SECRET
    JWT_REFRESH_SECRET = REFRESH_SECRET
    JWT_ACCESS_TTL = "15m"
    JWT_REFRESH_TTL = "30d"
    JWT_ALGORITHM = "HS256"
    JWT_LEEWAY_SECONDS = 0
    AUTH_REVOKE_ON_REPLAY = False
    REFRESH_COOKIE_NAME = "refresh_token"
    USE_PROXYFIX = True
    LOG_LEVEL = "WARNING"


@pytest.fixture
def config_class():
    """Configuration used by :func:`app`; override to tweak settings per module."""
    return TestConfig


@pytest.fixture
def app(config_class):
    """Create a Flask application with an active app context and fresh schema.

    Yields
    ------
    flask.Flask
        Application instance with :class:`TestConfig` applied.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    application = create_app(config_class, instance_relative_config=False)
    with application.app_context():
        _db.create_all()
        yield application
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def session(app):
    """Return the Flask-scoped session shared with the Units of Work."""
    return _db.session


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture
def components(app):
    """Token core bound to the application."""
    return app.extensions["authcore"]


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


# -- Hook up Factory Boy to the application session -----------------------------
@pytest.fixture(autouse=True)
def _factories_session(request):
    """Wire Factory Boy's session helper when a test uses the database."""
    from tests.factories import SQLAlchemySession

    if "app" in request.fixturenames:
        SQLAlchemySession.set(request.getfixturevalue("session"))
    yield
    SQLAlchemySession.set(None)
