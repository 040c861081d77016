"""Line-oriented text reading over any assetvfs file handle.

Templates and other text assets are read through this view rather than
``io.TextIOWrapper``, which needs ``readinto`` buffering and cookie-based
``tell`` that not every backend handle offers. The handle position always
sits right after the last character returned.
"""

from __future__ import annotations

import io
import re
from collections.abc import Iterator

from ._typing import File

_CHUNK_SIZE = 64
_LINE_END = re.compile(rb"[\r\n]")


class VFSTextHandle:
    """Decoding reader over a handle returned by ``FileSystem.open()``.

    ``\\n``, ``\\r\\n`` and a lone ``\\r`` all end a line, and the ending is
    kept. Leaving the ``with`` block does not close *handle*.

    >>> with fs.open("templates/base.txt") as f:
    ...     lines = list(VFSTextHandle(f))
    """

    def __init__(
        self,
        handle: File,
        encoding: str = "utf-8",
        errors: str = "strict",
    ) -> None:
        self._handle = handle
        self.encoding = encoding
        self.errors = errors

    def read(self, size: int = -1) -> str:
        """Decode up to *size* bytes, or the rest of the file."""
        return self._handle.read(size).decode(self.encoding, self.errors)

    def readline(self, limit: int = -1) -> str:
        line = bytearray()
        while limit < 0 or len(line) < limit:
            want = _CHUNK_SIZE if limit < 0 else min(_CHUNK_SIZE, limit - len(line))
            chunk = self._handle.read(want)
            if not chunk:
                break
            scanned = len(line)
            line += chunk
            match = _LINE_END.search(line, scanned)
            if match is None:
                continue
            end = match.end()
            if match.group() == b"\r":
                if end == len(line):
                    # "\r" closed the chunk; its "\n" may be in the next one.
                    line += self._handle.read(1)
                if line[end:end + 1] == b"\n":
                    end += 1
            if end < len(line):
                self._handle.seek(end - len(line), io.SEEK_CUR)
                del line[end:]
            break
        return line.decode(self.encoding, self.errors)

    def __iter__(self) -> Iterator[str]:
        line = self.readline()
        while line:
            yield line
            line = self.readline()

    def __enter__(self) -> VFSTextHandle:
        return self

    def __exit__(self, *args: object) -> None:
        return None
