from __future__ import annotations

from ._exceptions import (
    VFSError,
    VFSIsDirectoryError,
    VFSIsFileError,
    VFSNotExistError,
)
from ._path import clean_path, join_path
from ._typing import File, FileSystem, VFSStatResult, WalkFunc

_TRANSLATED_ERRORS = (VFSNotExistError, VFSIsDirectoryError, VFSIsFileError)


class SubdirFileSystem:
    """View of *fs* rooted at *prefix*.

    The prefix is not checked here; a missing prefix surfaces on the first
    ``open`` or ``walk``. Walked paths and assetvfs error paths are reported
    relative to the view.
    """

    def __init__(self, fs: FileSystem, prefix: str) -> None:
        self._fs = fs
        self._prefix = clean_path(prefix)

    @property
    def prefix(self) -> str:
        return self._prefix

    def _relative(self, path: str) -> str:
        npath = clean_path(path) or "."
        if self._prefix in ("", "."):
            return npath
        if npath == self._prefix:
            return "."
        if npath.startswith(self._prefix + "/"):
            return npath[len(self._prefix) + 1:]
        return npath

    def _translate(self, exc: VFSError) -> VFSError:
        return type(exc)(exc.op, self._relative(exc.filename), exc.strerror)

    def open(self, path: str) -> File:
        try:
            return self._fs.open(join_path(self._prefix, path))
        except _TRANSLATED_ERRORS as exc:
            raise self._translate(exc) from exc

    def walk(self, root: str, visitor: WalkFunc) -> None:
        raised: list[BaseException] = []

        def relative_visitor(
            path: str, info: VFSStatResult | None, error: OSError | None
        ) -> None:
            try:
                visitor(self._relative(path), info, error)
            except BaseException as exc:
                raised.append(exc)
                raise

        try:
            self._fs.walk(join_path(self._prefix, root), relative_visitor)
        except _TRANSLATED_ERRORS as exc:
            if raised and exc is raised[-1]:
                raise
            raise self._translate(exc) from exc

    def __repr__(self) -> str:
        return f"<SubdirFileSystem {self._prefix!r} of {self._fs!r}>"


def subdir(fs: FileSystem, prefix: str) -> SubdirFileSystem:
    """Return a view of *fs* rooted at *prefix*."""
    return SubdirFileSystem(fs, prefix)
