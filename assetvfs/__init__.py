from ._exceptions import (
    ErrorKind,
    VFSError,
    VFSFrozenError,
    VFSIsDirectoryError,
    VFSIsFileError,
    VFSNameConflictError,
    VFSNodeLimitExceededError,
    VFSNotExistError,
    error_kind,
)
from ._fallback import FallbackFileSystem, fallback
from ._handle import MemoryDirectoryHandle, MemoryFileHandle
from ._memory import STARTUP_TIME, MemoryFileSystem, MemoryTreeBuilder
from ._native import NativeDirectoryHandle, NativeFileHandle, NativeFileSystem, native
from ._path import clean_path, join_path, same_path
from ._registry import embedded, register_file
from ._subdir import SubdirFileSystem, subdir
from ._text import VFSTextHandle
from ._typing import File, FileSystem, VFSStatResult, WalkFunc

__all__ = [
    "File",
    "FileSystem",
    "WalkFunc",
    "VFSStatResult",
    "ErrorKind",
    "error_kind",
    "VFSError",
    "VFSNotExistError",
    "VFSIsDirectoryError",
    "VFSIsFileError",
    "VFSNameConflictError",
    "VFSNodeLimitExceededError",
    "VFSFrozenError",
    "clean_path",
    "join_path",
    "same_path",
    "NativeFileSystem",
    "NativeFileHandle",
    "NativeDirectoryHandle",
    "native",
    "MemoryTreeBuilder",
    "MemoryFileSystem",
    "MemoryFileHandle",
    "MemoryDirectoryHandle",
    "STARTUP_TIME",
    "register_file",
    "embedded",
    "FallbackFileSystem",
    "fallback",
    "SubdirFileSystem",
    "subdir",
    "VFSTextHandle",
]
__version__ = "0.1.0"
