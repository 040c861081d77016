"""Disk-backed filesystem rooted at a host directory.

Every call goes straight to the host, so changes on disk are visible
immediately. Host errors propagate unchanged, apart from a missing walk
root, which is reported as :class:`VFSNotExistError` relative to the
backend so that fallback chains can recognise it.
"""

from __future__ import annotations

import io
import logging
import os
import posixpath
import stat
from collections.abc import Callable
from typing import BinaryIO

from ._exceptions import VFSIsDirectoryError, VFSIsFileError, VFSNotExistError
from ._path import clean_path
from ._typing import VFSStatResult, WalkFunc

logger = logging.getLogger(__name__)

HostWalkFunc = Callable[[str, os.stat_result | None, OSError | None], None]


def _stat_from_host(name: str, st: os.stat_result) -> VFSStatResult:
    is_dir = stat.S_ISDIR(st.st_mode)
    return VFSStatResult(
        name=name,
        size=0 if is_dir else st.st_size,
        mode=st.st_mode,
        modified_at=st.st_mtime,
        is_dir=is_dir,
    )


class NativeFileHandle:
    """An open host file. ``close()`` releases the OS handle."""

    def __init__(self, fileobj: BinaryIO, path: str) -> None:
        self._file = fileobj
        self._path = path

    @property
    def name(self) -> str:
        return self._path

    def stat(self) -> VFSStatResult:
        st = os.fstat(self._file.fileno())
        return _stat_from_host(posixpath.basename(self._path), st)

    def read(self, size: int = -1) -> bytes:
        return self._file.read(size)

    def readinto(self, buffer: bytearray | memoryview) -> int:
        return self._file.readinto(buffer)  # type: ignore[attr-defined]

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        return self._file.seek(offset, whence)

    def tell(self) -> int:
        return self._file.tell()

    def readdir(self, count: int = -1) -> list[VFSStatResult]:
        if self._file.closed:
            raise ValueError("I/O operation on closed file.")
        raise VFSIsFileError("readdir", self._path)

    def readable(self) -> bool:
        return self._file.readable()

    def writable(self) -> bool:
        return False

    def seekable(self) -> bool:
        return self._file.seekable()

    def close(self) -> None:
        self._file.close()

    def __enter__(self) -> NativeFileHandle:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<NativeFileHandle {self._path!r}>"


class NativeDirectoryHandle:
    """An open host directory; entries are listed in name order."""

    def __init__(self, host_path: str, path: str) -> None:
        self._host_path = host_path
        self._path = path
        self._listing: list[VFSStatResult] | None = None
        self._offset: int = 0
        self._is_closed: bool = False

    @property
    def name(self) -> str:
        return self._path

    def _assert_open(self) -> None:
        if self._is_closed:
            raise ValueError("I/O operation on closed file.")

    def stat(self) -> VFSStatResult:
        self._assert_open()
        st = os.stat(self._host_path)
        return _stat_from_host(posixpath.basename(self._path), st)

    def read(self, size: int = -1) -> bytes:
        self._assert_open()
        raise VFSIsDirectoryError("read", self._path)

    def readinto(self, buffer: bytearray | memoryview) -> int:
        self._assert_open()
        raise VFSIsDirectoryError("read", self._path)

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        self._assert_open()
        raise VFSIsDirectoryError("seek", self._path)

    def tell(self) -> int:
        self._assert_open()
        raise VFSIsDirectoryError("seek", self._path)

    def readdir(self, count: int = -1) -> list[VFSStatResult]:
        self._assert_open()
        if self._listing is None:
            with os.scandir(self._host_path) as it:
                entries = sorted(it, key=lambda e: e.name)
                self._listing = [
                    _stat_from_host(e.name, e.stat(follow_symlinks=False))
                    for e in entries
                ]
        if count <= 0:
            end = len(self._listing)
        else:
            end = min(self._offset + count, len(self._listing))
        result = self._listing[self._offset:end]
        self._offset = end
        return result

    def readable(self) -> bool:
        self._assert_open()
        return False

    def writable(self) -> bool:
        self._assert_open()
        return False

    def seekable(self) -> bool:
        self._assert_open()
        return False

    def close(self) -> None:
        self._is_closed = True

    def __enter__(self) -> NativeDirectoryHandle:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<NativeDirectoryHandle {self._path!r}>"


def _walk_host(top: str, top_info: os.stat_result, visitor: HostWalkFunc) -> None:
    """Preorder walk of a host tree in sorted name order, without following links.

    Errors are handed to *visitor* as its third argument; the walk carries
    on unless the visitor raises.
    """
    stack: list[tuple[str, os.stat_result | None]] = [(top, top_info)]
    while stack:
        path, info = stack.pop()
        if info is None:
            try:
                info = os.lstat(path)
            except OSError as exc:
                visitor(path, None, exc)
                continue
        visitor(path, info, None)
        if not stat.S_ISDIR(info.st_mode):
            continue
        try:
            names = sorted(os.listdir(path))
        except OSError as exc:
            visitor(path, info, exc)
            continue
        stack.extend((os.path.join(path, name), None) for name in reversed(names))


def _strip_prefix_visitor(visitor: WalkFunc, prefix: str) -> HostWalkFunc:
    def strip(path: str, info: os.stat_result | None, error: OSError | None) -> None:
        # The entry may be unusable once the host reported an error.
        if error is not None:
            raise error
        rel = os.path.relpath(os.path.normpath(path), prefix)
        rel = rel.replace(os.sep, "/")
        assert info is not None
        visitor(rel, _stat_from_host(posixpath.basename(rel), info), None)

    return strip


class NativeFileSystem:
    """Filesystem backed by the host directory *root*.

    Raises the host error (usually :class:`FileNotFoundError`) when *root*
    cannot be stat'ed.
    """

    def __init__(self, root: str | os.PathLike[str]) -> None:
        root = os.fspath(root)
        os.stat(root)
        self._root: str = os.path.normpath(root)

    @property
    def root(self) -> str:
        return self._root

    def _host_path(self, path: str) -> tuple[str, str]:
        # Cleaning "/" + path keeps ".." from climbing above the root.
        rel = posixpath.normpath("/" + path.replace("\\", "/")).lstrip("/")
        if not rel:
            return ".", self._root
        return rel, os.path.join(self._root, *rel.split("/"))

    def open(self, path: str) -> NativeFileHandle | NativeDirectoryHandle:
        npath, host = self._host_path(path)
        st = os.stat(host)
        if stat.S_ISDIR(st.st_mode):
            return NativeDirectoryHandle(host, npath)
        return NativeFileHandle(open(host, "rb"), npath)

    def walk(self, root: str, visitor: WalkFunc) -> None:
        _, host_root = self._host_path(root)
        logger.debug("walk %r in %r", root, self)
        try:
            root_info = os.lstat(host_root)
        except FileNotFoundError as exc:
            raise VFSNotExistError("walk", clean_path(root)) from exc
        _walk_host(host_root, root_info, _strip_prefix_visitor(visitor, self._root))

    def __repr__(self) -> str:
        return f"<NativeFileSystem {self._root!r}>"


def native(root: str | os.PathLike[str]) -> NativeFileSystem:
    """Return a disk-backed filesystem rooted at *root*."""
    return NativeFileSystem(root)
