from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, TypedDict, runtime_checkable


class VFSStatResult(TypedDict):
    name: str
    size: int
    mode: int
    modified_at: float
    is_dir: bool


WalkFunc = Callable[[str, VFSStatResult | None, OSError | None], None]


@runtime_checkable
class File(Protocol):
    """An open entry: random-access reads for files, listing for directories."""

    def stat(self) -> VFSStatResult: ...

    def read(self, size: int = -1) -> bytes: ...

    def readinto(self, buffer: bytearray | memoryview) -> int: ...

    def seek(self, offset: int, whence: int = 0) -> int: ...

    def tell(self) -> int: ...

    def readdir(self, count: int = -1) -> list[VFSStatResult]: ...

    def close(self) -> None: ...

    def __enter__(self) -> File: ...

    def __exit__(self, *args: object) -> None: ...


@runtime_checkable
class FileSystem(Protocol):
    """Anything that can open paths and walk trees."""

    def open(self, path: str) -> File: ...

    def walk(self, root: str, visitor: WalkFunc) -> None: ...
