import io

import pytest
from werkzeug.datastructures import MultiDict

from photos.photo_repository import PhotoRepository
from photos.travel_path import build_travel_path
from photos.uploads import parse_coordinates
from travel.models import Photo
from helpers import add_photo


@pytest.fixture
def repo(db, bucket):
    return PhotoRepository(db, bucket)


def test_save_photo_uploads_blob_and_stores_url(db, bucket, repo, tmp_path):
    local = tmp_path / "capture.jpg"
    local.write_bytes(b"\xff\xd8fake-jpeg")
    photo = Photo(id="p1", user_id="alice", trip_id="t1", latitude=1.5, longitude=2.5,
                  date="2025-03-04", timestamp=123, local_path=str(local))

    saved = repo.save_photo(photo, local_path=str(local))

    bucket.blob.assert_called_once_with("photos/p1.jpg")
    bucket.blob.return_value.upload_from_filename.assert_called_once_with(str(local), content_type="image/jpeg")
    assert saved.image_url.startswith(
        "https://firebasestorage.googleapis.com/v0/b/test-bucket.appspot.com/o/photos%2Fp1.jpg?alt=media&token="
    )
    assert db.docs("photos")["p1"]["imageUrl"] == saved.image_url
    assert db.docs("photos")["p1"]["tripId"] == "t1"
    assert not local.exists()


def test_save_photo_from_file_object(db, bucket, repo):
    stream = io.BytesIO(b"bytes")

    repo.save_photo(Photo(id="p2", user_id="alice"), file_obj=stream)

    bucket.blob.return_value.upload_from_file.assert_called_once_with(stream, content_type="image/jpeg")
    assert "p2" in db.docs("photos")


def test_failed_upload_writes_no_document(db, bucket, repo, tmp_path):
    local = tmp_path / "capture.jpg"
    local.write_bytes(b"x")
    bucket.blob.return_value.upload_from_filename.side_effect = RuntimeError("network down")

    with pytest.raises(RuntimeError):
        repo.save_photo(Photo(id="p1", user_id="alice"), local_path=str(local))

    assert db.docs("photos") == {}
    assert local.exists()


def test_save_photo_needs_a_source(repo):
    with pytest.raises(ValueError):
        repo.save_photo(Photo(id="p1"))


def test_last_photo_for_trip(db, repo):
    add_photo(db, "early", "t1", "alice", timestamp=100)
    add_photo(db, "late", "t1", "alice", timestamp=900)
    add_photo(db, "other", "t2", "alice", timestamp=5000)

    assert repo.get_last_photo_for_trip("t1").id == "late"
    assert repo.get_last_photo_for_trip("empty") is None
    assert sorted(p.id for p in repo.get_photos_for_trip("t1")) == ["early", "late"]
    assert len(repo.get_all_photos()) == 3


def test_travel_path_orders_by_time_and_skips_missing_fix():
    photos = [
        Photo(id="b", latitude=48.8566, longitude=2.3522, timestamp=2),    # Paris
        Photo(id="a", latitude=51.5074, longitude=-0.1278, timestamp=1),   # London
        Photo(id="nofix", latitude=0.0, longitude=0.0, timestamp=3),
    ]

    path = build_travel_path(photos)

    assert [p["photo_id"] for p in path["points"]] == ["a", "b"]
    assert path["point_count"] == 2
    assert 330 < path["distance_km"] < 350


def test_travel_path_of_single_photo_has_no_distance():
    path = build_travel_path([Photo(id="a", latitude=10.0, longitude=10.0)])
    assert path["distance_km"] == 0.0


def test_parse_coordinates():
    assert parse_coordinates(MultiDict({"latitude": "1.5", "longitude": "-2"})) == {"latitude": 1.5, "longitude": -2.0}
    assert parse_coordinates(MultiDict({"latitude": "1.5"})) is None
    with pytest.raises(ValueError):
        parse_coordinates(MultiDict({"latitude": "abc", "longitude": "2"}))
    with pytest.raises(ValueError):
        parse_coordinates(MultiDict({"latitude": "95", "longitude": "2"}))
