import os
import stat

import pytest

from assetvfs import (
    NativeDirectoryHandle,
    NativeFileHandle,
    NativeFileSystem,
    VFSIsDirectoryError,
    VFSIsFileError,
    VFSNotExistError,
    native,
)
from tests.helpers.asserts import assert_preorder
from tests.helpers.fakes import Recorder


def test_missing_root_raises_host_error(tmp_path):
    with pytest.raises(FileNotFoundError):
        NativeFileSystem(tmp_path / "missing")


def test_native_factory(tmp_path):
    fs = native(str(tmp_path))
    assert isinstance(fs, NativeFileSystem)
    assert fs.root == os.path.normpath(str(tmp_path))


def test_open_file(asset_dir):
    with asset_dir.open("static/css/site.css") as f:
        assert isinstance(f, NativeFileHandle)
        assert f.read() == b"body { margin: 0; }\n"


def test_open_with_leading_slash(asset_dir):
    with asset_dir.open("/index.html") as f:
        assert f.read().startswith(b"<html>")


def test_open_seek_and_readinto(asset_dir):
    buf = bytearray(3)
    with asset_dir.open("static/logo.png") as f:
        assert f.seek(1) == 1
        assert f.readinto(buf) == 3
        assert bytes(buf) == b"PNG"
        assert f.tell() == 4


def test_file_stat(asset_dir):
    with asset_dir.open("static/logo.png") as f:
        info = f.stat()
    assert info["name"] == "logo.png"
    assert info["size"] == 16
    assert not info["is_dir"]
    assert info["modified_at"] == 1_600_000_000.0
    assert stat.S_ISREG(info["mode"])


def test_file_readdir_raises_is_file(asset_dir):
    with asset_dir.open("index.html") as f:
        with pytest.raises(VFSIsFileError):
            f.readdir()


def test_open_directory_lists_sorted(asset_dir):
    with asset_dir.open("static") as d:
        assert isinstance(d, NativeDirectoryHandle)
        entries = d.readdir()
        assert d.stat()["is_dir"]
    assert [e["name"] for e in entries] == ["css", "logo.png"]
    assert entries[0]["is_dir"]
    assert entries[0]["size"] == 0


def test_directory_readdir_paging(asset_dir):
    with asset_dir.open(".") as d:
        assert [e["name"] for e in d.readdir(2)] == ["index.html", "static"]
        assert [e["name"] for e in d.readdir(2)] == ["templates"]
        assert d.readdir(2) == []


def test_directory_read_raises(asset_dir):
    with asset_dir.open("static") as d:
        with pytest.raises(VFSIsDirectoryError):
            d.read()


def test_open_root(asset_dir):
    for path in ("", "/", "."):
        with asset_dir.open(path) as d:
            assert d.stat()["is_dir"]


def test_open_missing_is_host_error(asset_dir):
    with pytest.raises(FileNotFoundError) as excinfo:
        asset_dir.open("nope.txt")
    assert not isinstance(excinfo.value, VFSNotExistError)


def test_open_cannot_escape_root(tmp_path):
    (tmp_path / "outside.txt").write_bytes(b"secret")
    (tmp_path / "root").mkdir()
    fs = NativeFileSystem(tmp_path / "root")
    with pytest.raises(FileNotFoundError):
        fs.open("../outside.txt")


def test_live_changes_are_visible(asset_dir):
    with pytest.raises(FileNotFoundError):
        asset_dir.open("late.txt")
    with open(os.path.join(asset_dir.root, "late.txt"), "wb") as f:
        f.write(b"late")
    with asset_dir.open("late.txt") as f:
        assert f.read() == b"late"


def test_walk_reports_backend_relative_paths(asset_dir):
    rec = Recorder()
    asset_dir.walk(".", rec)
    assert rec.paths == [
        ".",
        "index.html",
        "static",
        "static/css",
        "static/css/site.css",
        "static/logo.png",
        "templates",
        "templates/base.txt",
    ]
    assert_preorder(rec.paths)
    assert rec.infos["static/logo.png"]["size"] == 16


def test_walk_subdirectory(asset_dir):
    rec = Recorder()
    asset_dir.walk("static/css", rec)
    assert rec.paths == ["static/css", "static/css/site.css"]


def test_walk_single_file(asset_dir):
    rec = Recorder()
    asset_dir.walk("index.html", rec)
    assert rec.paths == ["index.html"]


def test_walk_missing_root_raises_not_exist(asset_dir):
    rec = Recorder()
    with pytest.raises(VFSNotExistError) as excinfo:
        asset_dir.walk("/nope/", rec)
    assert excinfo.value.filename == "nope"
    assert isinstance(excinfo.value.__cause__, FileNotFoundError)
    assert rec.paths == []


def test_walk_visitor_exception_propagates(asset_dir):
    class Stop(Exception):
        pass

    def visitor(path, info, error):
        if path == "static":
            raise Stop()

    with pytest.raises(Stop):
        asset_dir.walk(".", visitor)


@pytest.mark.skipif(
    not hasattr(os, "geteuid") or os.geteuid() == 0,
    reason="permission bits are not enforced for root",
)
def test_walk_host_error_propagates_untouched(asset_dir):
    locked = os.path.join(asset_dir.root, "static", "css")
    os.chmod(locked, 0)
    try:
        rec = Recorder()
        with pytest.raises(PermissionError) as excinfo:
            asset_dir.walk("static", rec)
        assert excinfo.value.filename == locked
        assert "static/logo.png" not in rec.paths
        assert rec.paths[:2] == ["static", "static/css"]
    finally:
        os.chmod(locked, 0o755)


def test_strip_prefix_raises_error_before_relpath():
    from assetvfs._native import _strip_prefix_visitor

    rec = Recorder()
    strip = _strip_prefix_visitor(rec, "/srv/assets")
    err = PermissionError(13, "denied", "/elsewhere/x")
    with pytest.raises(PermissionError) as excinfo:
        strip("/elsewhere/x", None, err)
    assert excinfo.value is err
    assert rec.paths == []
