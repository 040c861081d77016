from __future__ import annotations

import logging
import stat
import time
from collections.abc import Mapping
from datetime import datetime
from types import MappingProxyType

from ._exceptions import (
    VFSFrozenError,
    VFSIsFileError,
    VFSNameConflictError,
    VFSNodeLimitExceededError,
    VFSNotExistError,
)
from ._handle import MemoryDirectoryHandle, MemoryFileHandle
from ._path import clean_path, join_path, split_path
from ._typing import VFSStatResult, WalkFunc

logger = logging.getLogger(__name__)

# Directories carry no timestamp of their own; they all report this one.
STARTUP_TIME: float = time.time()

DIR_MODE: int = stat.S_IFDIR | 0o400
FILE_MODE: int = stat.S_IFREG | 0o400

DEFAULT_MAX_DEPTH: int = 256

# ---------------------------------------------------------------------------
#  Tree nodes
# ---------------------------------------------------------------------------


class FileRecord:
    __slots__ = ("name", "modified_at", "data")

    def __init__(self, name: str, modified_at: float, data: bytes) -> None:
        self.name: str = name
        self.modified_at: float = modified_at
        self.data: bytes = data

    def stat(self) -> VFSStatResult:
        return VFSStatResult(
            name=self.name,
            size=len(self.data),
            mode=FILE_MODE,
            modified_at=self.modified_at,
            is_dir=False,
        )


class DirNode:
    __slots__ = ("name", "files", "dirs")

    def __init__(self, name: str) -> None:
        self.name: str = name
        self.files: Mapping[str, FileRecord] = {}
        self.dirs: Mapping[str, DirNode] = {}

    def stat(self) -> VFSStatResult:
        return VFSStatResult(
            name=self.name,
            size=0,
            mode=DIR_MODE,
            modified_at=STARTUP_TIME,
            is_dir=True,
        )


Node = DirNode | FileRecord


def _as_timestamp(modified_at: float | datetime) -> float:
    if isinstance(modified_at, datetime):
        return modified_at.timestamp()
    return float(modified_at)


# ---------------------------------------------------------------------------
#  MemoryTreeBuilder
# ---------------------------------------------------------------------------


class MemoryTreeBuilder:
    """Accumulates registered files, then freezes them into a MemoryFileSystem.

    Registration is the only mutating operation and must be finished before
    any read. ``freeze()`` ends the build phase: the returned tree is
    immutable and further registration raises :class:`VFSFrozenError`.

    Parameters
    ----------
    max_nodes:
        Maximum number of nodes (files and directories, root included).
        ``None`` means unlimited.
    max_depth:
        Maximum number of path components in a registered path.
    """

    def __init__(
        self,
        max_nodes: int | None = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        if max_depth < 1:
            raise ValueError(f"max_depth must be >= 1, got {max_depth}")
        self._root = DirNode(".")
        self._node_count: int = 1
        self._max_nodes: int | None = max_nodes
        self._max_depth: int = max_depth
        self._frozen: MemoryFileSystem | None = None

    @property
    def is_frozen(self) -> bool:
        return self._frozen is not None

    @property
    def node_count(self) -> int:
        return self._node_count

    def register_file(
        self, path: str, modified_at: float | datetime, content: bytes
    ) -> None:
        """Store *content* at *path*, creating missing parent directories.

        Registering an existing file path replaces its record.
        """
        if self._frozen is not None:
            raise VFSFrozenError(path)
        npath = clean_path(path)
        parts = split_path(npath)
        if not parts or any(p in (".", "..") for p in parts):
            raise ValueError(f"Invalid registration path: '{path}'")
        if len(parts) > self._max_depth:
            raise ValueError(
                f"Path '{path}' has {len(parts)} components, "
                f"max_depth is {self._max_depth}."
            )
        mtime = _as_timestamp(modified_at)
        # memoryview rejects ints and str, which bytes() would accept.
        data = bytes(memoryview(content))

        # Walk the existing part of the path first so that a conflict or a
        # node limit leaves the tree untouched.
        current = self._root
        depth = 0
        for part in parts[:-1]:
            if part in current.files:
                raise VFSNameConflictError(
                    "register",
                    "/".join(parts[: depth + 1]),
                    "a file already exists where a directory is needed",
                )
            child = current.dirs.get(part)
            if child is None:
                break
            current = child
            depth += 1

        missing_dirs = len(parts) - 1 - depth
        name = parts[-1]
        if missing_dirs == 0 and name in current.dirs:
            raise VFSNameConflictError(
                "register", npath, "a directory already exists at this path"
            )
        new_nodes = missing_dirs
        if missing_dirs > 0 or name not in current.files:
            new_nodes += 1
        if self._max_nodes is not None and self._node_count + new_nodes > self._max_nodes:
            raise VFSNodeLimitExceededError(npath, self._node_count, self._max_nodes)

        for part in parts[depth:-1]:
            child = DirNode(part)
            current.dirs[part] = child  # type: ignore[index]
            current = child
        current.files[name] = FileRecord(name, mtime, data)  # type: ignore[index]
        self._node_count += new_nodes

    def register_tree(
        self,
        tree: Mapping[str, bytes],
        modified_at: float | datetime | None = None,
    ) -> None:
        """Register every ``path -> content`` pair of *tree*.

        All files share *modified_at*, which defaults to the current time.
        """
        mtime = time.time() if modified_at is None else modified_at
        for path, data in tree.items():
            self.register_file(path, mtime, data)

    def freeze(self) -> MemoryFileSystem:
        """End the build phase and return the immutable tree.

        Calling ``freeze()`` again returns the same instance.
        """
        if self._frozen is None:
            _freeze_nodes(self._root)
            self._frozen = MemoryFileSystem(self._root)
            logger.debug("froze memory tree with %d nodes", self._node_count)
        return self._frozen


def _freeze_nodes(root: DirNode) -> None:
    stack = [root]
    while stack:
        node = stack.pop()
        node.files = MappingProxyType(dict(node.files))
        node.dirs = MappingProxyType(dict(node.dirs))
        stack.extend(node.dirs.values())


# ---------------------------------------------------------------------------
#  MemoryFileSystem
# ---------------------------------------------------------------------------


class MemoryFileSystem:
    """Read-only filesystem over a frozen in-memory tree.

    Instances come from :meth:`MemoryTreeBuilder.freeze` or
    :meth:`from_tree`; ``MemoryFileSystem()`` is an empty tree.
    """

    def __init__(self, root: DirNode | None = None) -> None:
        if root is None:
            root = DirNode(".")
            _freeze_nodes(root)
        self._root = root

    @classmethod
    def from_tree(
        cls,
        tree: Mapping[str, bytes],
        modified_at: float | datetime | None = None,
    ) -> MemoryFileSystem:
        builder = MemoryTreeBuilder()
        builder.register_tree(tree, modified_at)
        return builder.freeze()

    # -- path helpers --

    def _resolve_path(self, npath: str) -> Node | None:
        if npath in ("", ".."):
            return None
        if npath == ".":
            return self._root
        parts = npath.split("/")
        current = self._root
        for part in parts[:-1]:
            child = current.dirs.get(part)
            if child is None:
                return None
            current = child
        last = parts[-1]
        # Files shadow directories of the same name; registration rejects
        # such pairs, so this only matters for hand-built trees.
        record = current.files.get(last)
        if record is not None:
            return record
        return current.dirs.get(last)

    # -- public API --

    def open(self, path: str) -> MemoryFileHandle | MemoryDirectoryHandle:
        npath = clean_path(path)
        node = self._resolve_path(npath)
        if node is None:
            raise VFSNotExistError("open", npath)
        if isinstance(node, FileRecord):
            return MemoryFileHandle(node, npath)
        return MemoryDirectoryHandle(node, npath)

    def walk(self, root: str, visitor: WalkFunc) -> None:
        """Visit *root* and every entry below it, directories before their children.

        Within a directory, files are visited before subdirectories; the
        order among siblings is not defined. Exceptions raised by
        *visitor* stop the walk and propagate.
        """
        npath = clean_path(root)
        node = self._resolve_path(npath)
        if node is None:
            raise VFSNotExistError("walk", npath)
        if isinstance(node, FileRecord):
            raise VFSIsFileError("walk", npath)
        stack: list[tuple[str, DirNode]] = [(npath, node)]
        while stack:
            dir_path, dir_node = stack.pop()
            visitor(dir_path, dir_node.stat(), None)
            for name, record in dir_node.files.items():
                visitor(join_path(dir_path, name), record.stat(), None)
            children = [
                (join_path(dir_path, name), child)
                for name, child in dir_node.dirs.items()
            ]
            stack.extend(reversed(children))

    def stat(self, path: str) -> VFSStatResult:
        npath = clean_path(path)
        node = self._resolve_path(npath)
        if node is None:
            raise VFSNotExistError("stat", npath)
        return node.stat()

    def exists(self, path: str) -> bool:
        return self._resolve_path(clean_path(path)) is not None

    def is_dir(self, path: str) -> bool:
        return isinstance(self._resolve_path(clean_path(path)), DirNode)

    def is_file(self, path: str) -> bool:
        return isinstance(self._resolve_path(clean_path(path)), FileRecord)

    def __repr__(self) -> str:
        return "<MemoryFileSystem>"
