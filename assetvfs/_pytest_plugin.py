"""pytest fixture plugin.

Usage::

    # conftest.py
    pytest_plugins = ["assetvfs._pytest_plugin"]

This makes the ``asset_tree`` and ``asset_dir`` fixtures available. Both
serve the same small tree (:data:`SAMPLE_TREE`), one from memory and one
from a temporary directory::

    def test_logo(asset_tree):
        with asset_tree.open("static/logo.png") as f:
            assert f.read().startswith(b"\\x89PNG")
"""

import os

import pytest

from ._memory import MemoryFileSystem, MemoryTreeBuilder
from ._native import NativeFileSystem

SAMPLE_MTIME: float = 1_600_000_000.0

SAMPLE_TREE: dict[str, bytes] = {
    "index.html": b"<html><body>hello</body></html>\n",
    "static/logo.png": b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR",
    "static/css/site.css": b"body { margin: 0; }\n",
    "templates/base.txt": b"line one\nline two\r\nline three\rend",
}


@pytest.fixture
def asset_tree() -> MemoryFileSystem:
    """A frozen :class:`MemoryFileSystem` holding :data:`SAMPLE_TREE`."""
    builder = MemoryTreeBuilder()
    builder.register_tree(SAMPLE_TREE, modified_at=SAMPLE_MTIME)
    return builder.freeze()


@pytest.fixture
def asset_dir(tmp_path) -> NativeFileSystem:
    """A :class:`NativeFileSystem` over a temporary copy of :data:`SAMPLE_TREE`."""
    for rel, data in SAMPLE_TREE.items():
        target = tmp_path.joinpath(*rel.split("/"))
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        os.utime(target, (SAMPLE_MTIME, SAMPLE_MTIME))
    return NativeFileSystem(tmp_path)
