"""Process-wide embedded asset tree.

Generated asset modules call :func:`register_file` once per file while the
program starts up; application code then calls :func:`embedded` to get the
frozen tree. Registering after the first :func:`embedded` call raises
:class:`~assetvfs.VFSFrozenError`.
"""

from __future__ import annotations

from datetime import datetime

from ._memory import MemoryFileSystem, MemoryTreeBuilder

_default_builder = MemoryTreeBuilder()


def register_file(path: str, modified_at: float | datetime, content: bytes) -> None:
    _default_builder.register_file(path, modified_at, content)


def embedded() -> MemoryFileSystem:
    return _default_builder.freeze()
