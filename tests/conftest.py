from unittest.mock import MagicMock, patch

import pytest

from fake_firestore import FakeFirestore


def fake_verify_id_token(id_token):
    # Tests authenticate with "Bearer <uid>"
    if id_token == "invalid":
        raise ValueError("Token expired")
    return {"uid": id_token}


@pytest.fixture
def db():
    return FakeFirestore()


@pytest.fixture
def bucket():
    bucket = MagicMock()
    bucket.name = "test-bucket.appspot.com"
    return bucket


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    folder = tmp_path / "uploads"
    monkeypatch.setattr("photos.uploads.UPLOAD_FOLDER", str(folder))
    monkeypatch.setattr("app.UPLOAD_FOLDER", str(folder))
    return folder


@pytest.fixture
def flask_app(db, bucket, upload_dir):
    from app import create_app

    with patch("firebase_admin.auth.verify_id_token", side_effect=fake_verify_id_token):
        flask_app = create_app(db_instance=db, bucket=bucket)
        flask_app.config["TESTING"] = True
        yield flask_app


@pytest.fixture
def client(flask_app):
    return flask_app.test_client()
