"""Serve the same static assets from disk in development and from memory in release."""
import pytest

from assetvfs import (
    MemoryTreeBuilder,
    VFSTextHandle,
    fallback,
    native,
    subdir,
)
from assetvfs._pytest_plugin import SAMPLE_MTIME, SAMPLE_TREE


def _collect_files(fs, root="."):
    files = {}

    def visitor(path, info, error):
        if not info["is_dir"]:
            with fs.open(path) as f:
                files[path] = f.read()

    fs.walk(root, visitor)
    return files


@pytest.fixture(params=["disk", "embedded"])
def assets(request, asset_dir, asset_tree):
    return asset_dir if request.param == "disk" else asset_tree


def test_same_content_from_either_backend(assets):
    assert _collect_files(assets) == SAMPLE_TREE


def test_same_metadata_from_either_backend(assets):
    with assets.open("static/logo.png") as f:
        info = f.stat()
    assert info["size"] == len(SAMPLE_TREE["static/logo.png"])
    assert info["modified_at"] == SAMPLE_MTIME


def test_templates_read_as_text(assets):
    with assets.open("templates/base.txt") as f:
        assert VFSTextHandle(f).readline() == "line one\n"


def test_disk_overrides_embedded(asset_dir, asset_tree):
    with open(f"{asset_dir.root}/static/css/site.css", "wb") as f:
        f.write(b"body { margin: 1em; }\n")
    fs = fallback(asset_dir, asset_tree)
    with fs.open("static/css/site.css") as f:
        assert f.read() == b"body { margin: 1em; }\n"


def test_static_root_served_from_embedded_when_disk_lacks_it(tmp_path, asset_tree):
    (tmp_path / "unrelated").mkdir()
    fs = fallback(subdir(native(tmp_path), "static"), subdir(asset_tree, "static"))
    files = _collect_files(fs)
    assert files == {
        "logo.png": SAMPLE_TREE["static/logo.png"],
        "css/site.css": SAMPLE_TREE["static/css/site.css"],
    }


def test_embedded_overlay_adds_generated_files(asset_dir):
    builder = MemoryTreeBuilder()
    builder.register_file("static/version.txt", SAMPLE_MTIME, b"1.2.3\n")
    generated = builder.freeze()
    fs = fallback(asset_dir, generated)
    with fs.open("static/version.txt") as f:
        assert f.read() == b"1.2.3\n"
    with fs.open("static/logo.png") as f:
        assert f.read() == SAMPLE_TREE["static/logo.png"]
