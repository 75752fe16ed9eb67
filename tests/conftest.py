"""Shared fixtures: an app bound to a throwaway storage directory."""

import pytest

from lanshare import create_app


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def public_dir(tmp_path):
    path = tmp_path / "public"
    path.mkdir()
    return path


@pytest.fixture
def app(upload_dir, public_dir):
    app = create_app(upload_dir, public_dir=public_dir)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def stored_names():
    """Sorted entry names of a directory, hidden ones included."""

    def names(directory):
        return sorted(p.name for p in directory.iterdir())

    return names
