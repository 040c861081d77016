from __future__ import annotations

import io
from typing import TYPE_CHECKING

from ._exceptions import VFSIsDirectoryError, VFSIsFileError
from ._typing import VFSStatResult

if TYPE_CHECKING:
    from ._memory import DirNode, FileRecord


class MemoryFileHandle:
    """Read cursor over the immutable content of one registered file.

    Every ``open`` creates a new handle, so cursors are never shared.
    """

    def __init__(self, record: FileRecord, path: str) -> None:
        self._record = record
        self._path = path
        self._data = memoryview(record.data)
        self._cursor: int = 0
        self._is_closed: bool = False

    @property
    def name(self) -> str:
        return self._path

    def _assert_open(self) -> None:
        if self._is_closed:
            raise ValueError("I/O operation on closed file.")

    def stat(self) -> VFSStatResult:
        self._assert_open()
        return self._record.stat()

    def read(self, size: int = -1) -> bytes:
        self._assert_open()
        current_size = len(self._data)
        if self._cursor >= current_size:
            return b""
        if size < 0:
            end = current_size
        else:
            end = min(self._cursor + size, current_size)
        data = self._data[self._cursor:end].tobytes()
        self._cursor = end
        return data

    def readinto(self, buffer: bytearray | memoryview) -> int:
        self._assert_open()
        view = memoryview(buffer).cast("B")
        available = max(0, len(self._data) - self._cursor)
        n = min(len(view), available)
        view[:n] = self._data[self._cursor:self._cursor + n]
        self._cursor += n
        return n

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        self._assert_open()
        if whence == io.SEEK_SET:
            if offset < 0:
                raise ValueError("seek offset must be >= 0 for SEEK_SET")
            new_pos = offset
        elif whence == io.SEEK_CUR:
            new_pos = self._cursor + offset
        elif whence == io.SEEK_END:
            new_pos = len(self._data) + offset
        else:
            raise ValueError(f"Invalid whence value: {whence}. Must be 0, 1, or 2.")
        if new_pos < 0:
            raise ValueError(f"Resulting cursor position {new_pos} is negative.")
        self._cursor = new_pos
        return self._cursor

    def tell(self) -> int:
        self._assert_open()
        return self._cursor

    def readdir(self, count: int = -1) -> list[VFSStatResult]:
        self._assert_open()
        raise VFSIsFileError("readdir", self._path)

    def readable(self) -> bool:
        self._assert_open()
        return True

    def writable(self) -> bool:
        self._assert_open()
        return False

    def seekable(self) -> bool:
        self._assert_open()
        return True

    def close(self) -> None:
        if self._is_closed:
            return
        self._is_closed = True

    def __enter__(self) -> MemoryFileHandle:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<MemoryFileHandle {self._path!r} at {self._cursor}>"


class MemoryDirectoryHandle:
    """Listing handle over one directory node of a frozen memory tree."""

    def __init__(self, node: DirNode, path: str) -> None:
        self._node = node
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
        return self._node.stat()

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
        """Return up to *count* child entries (all remaining when ``count <= 0``).

        Successive calls continue where the previous one stopped; an
        exhausted listing returns an empty list.
        """
        self._assert_open()
        if self._listing is None:
            self._listing = [f.stat() for f in self._node.files.values()]
            self._listing.extend(d.stat() for d in self._node.dirs.values())
        if count <= 0:
            end = len(self._listing)
        else:
            end = min(self._offset + count, len(self._listing))
        entries = self._listing[self._offset:end]
        self._offset = end
        return entries

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

    def __enter__(self) -> MemoryDirectoryHandle:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<MemoryDirectoryHandle {self._path!r}>"
