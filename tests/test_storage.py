import io
import os
import re

import pytest
from werkzeug.datastructures import FileStorage

from storage import Bucket, PendingBlobs, StorageError, allowed_file, remove_url, timestamped_path


def _file(name="foto.png", content=b"img"):
    return FileStorage(stream=io.BytesIO(content), filename=name)


@pytest.fixture
def bucket(tmp_path):
    return Bucket("galery", root=str(tmp_path), base_url="http://cdn.test")


def test_timestamped_path():
    path = timestamped_path("gallery", "portada", "mi foto.PNG")
    assert re.fullmatch(r"gallery/\d+_portada_mi_foto\.PNG", path)
    assert re.fullmatch(r"\d+_logo_a\.png", timestamped_path("", "logo", "a.png"))


def test_allowed_file():
    assert allowed_file("a.JPG")
    assert not allowed_file("a.exe")
    assert not allowed_file("noext")


def test_upload_and_public_url(bucket, tmp_path):
    bucket.upload("gallery/1_portada_a.png", _file())
    assert (tmp_path / "galery" / "gallery" / "1_portada_a.png").read_bytes() == b"img"
    url = bucket.get_public_url("gallery/1_portada_a.png")
    assert url == "http://cdn.test/uploads/galery/gallery/1_portada_a.png"
    assert bucket.path_from_public_url(url) == "gallery/1_portada_a.png"


def test_path_from_foreign_url(bucket):
    assert bucket.path_from_public_url("https://other.test/uploads/paquetes/a.png") is None
    assert bucket.path_from_public_url(None) is None


def test_remove_ignores_missing(bucket):
    bucket.upload("x.png", _file())
    assert bucket.remove(["x.png", "missing.png"]) == ["x.png"]


def test_path_traversal_rejected(bucket):
    with pytest.raises(StorageError):
        bucket.upload("../fuera.png", _file())


def test_remove_url_logs_failures(bucket, monkeypatch):
    def boom(paths):
        raise StorageError("disk")

    monkeypatch.setattr(bucket, "remove", boom)
    assert remove_url(bucket, "http://cdn.test/uploads/galery/a.png") is False


def test_pending_blobs_finalize_removes_previous(bucket, tmp_path):
    bucket.upload("gallery/old.png", _file())
    old_url = bucket.get_public_url("gallery/old.png")

    pending = PendingBlobs(bucket)
    new_url = pending.put("gallery", "portada", _file("new.png"), previous_url=old_url)
    assert os.path.exists(tmp_path / "galery" / "gallery" / "old.png")

    pending.finalize()
    assert not os.path.exists(tmp_path / "galery" / "gallery" / "old.png")
    assert os.path.exists(tmp_path / "galery" / bucket.path_from_public_url(new_url))


def test_pending_blobs_discard_removes_new_uploads(bucket, tmp_path):
    bucket.upload("gallery/old.png", _file())
    old_url = bucket.get_public_url("gallery/old.png")

    pending = PendingBlobs(bucket)
    new_url = pending.put("gallery", "portada", _file("new.png"), previous_url=old_url)
    pending.discard()

    assert os.path.exists(tmp_path / "galery" / "gallery" / "old.png")
    assert not os.path.exists(tmp_path / "galery" / bucket.path_from_public_url(new_url))
