"""Pytest fixtures shared by the route and seeding tests."""

import sys
from pathlib import Path

import pytest

repo_root = str(Path(__file__).resolve().parents[1])
if repo_root not in sys.path:
    sys.path.insert(0, repo_root)

from app import create_app  # noqa: E402
from db import db  # noqa: E402


@pytest.fixture
def app():
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite://",
        "API_KEY": None,
        "FARM_TIMEZONE": "UTC",
    })
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()
