from __future__ import annotations

import logging

from ._exceptions import ErrorKind, VFSNotExistError, error_kind
from ._path import clean_path, same_path
from ._typing import File, FileSystem, VFSStatResult, WalkFunc

logger = logging.getLogger(__name__)


class _TrackingVisitor:
    """Wraps a visitor, counting calls and remembering what it raised."""

    __slots__ = ("_visitor", "raised", "calls")

    def __init__(self, visitor: WalkFunc) -> None:
        self._visitor = visitor
        self.raised: BaseException | None = None
        self.calls: int = 0

    def __call__(
        self, path: str, info: VFSStatResult | None, error: OSError | None
    ) -> None:
        self.calls += 1
        try:
            self._visitor(path, info, error)
        except BaseException as exc:
            self.raised = exc
            raise


class FallbackFileSystem:
    """Tries each wrapped filesystem in order until one succeeds.

    ``open`` falls through on any error. ``walk`` only falls through when
    the root itself was not found before the visitor saw any entry; once
    an entry has been delivered, retrying would deliver it again.

    When every filesystem misses the walk root, the last not-found error is
    raised rather than treating the walk as an empty success.
    """

    def __init__(self, *filesystems: FileSystem) -> None:
        self._filesystems: tuple[FileSystem, ...] = filesystems

    @property
    def filesystems(self) -> tuple[FileSystem, ...]:
        return self._filesystems

    def open(self, path: str) -> File:
        """Return the first successful ``open``.

        When every filesystem fails, the error of the last one attempted is
        raised; earlier errors are only logged.
        """
        last_error: Exception | None = None
        for attempt in self._filesystems:
            logger.debug("attempt %r in %r", path, attempt)
            try:
                return attempt.open(path)
            except Exception as exc:
                logger.debug("open %r in %r failed: %s", path, attempt, exc)
                last_error = exc
        if last_error is None:
            raise VFSNotExistError("open", clean_path(path))
        raise last_error

    def walk(self, root: str, visitor: WalkFunc) -> None:
        last_miss: Exception | None = None
        for attempt in self._filesystems:
            tracker = _TrackingVisitor(visitor)
            try:
                attempt.walk(root, tracker)
            except Exception as exc:
                logger.debug("walk %r in %r: %s", root, attempt, exc)
                if exc is tracker.raised:
                    raise
                kind = error_kind(exc)
                failed_at = getattr(exc, "filename", None)
                if (
                    tracker.calls == 0
                    and kind is ErrorKind.NOT_EXIST
                    and same_path(failed_at, root)
                ):
                    last_miss = exc
                    continue
                raise
            logger.debug("walk %r in %r: done", root, attempt)
            return
        if last_miss is None:
            raise VFSNotExistError("walk", clean_path(root))
        raise last_miss

    def __repr__(self) -> str:
        return f"<FallbackFileSystem {list(self._filesystems)!r}>"


def fallback(*filesystems: FileSystem) -> FallbackFileSystem:
    """Return a filesystem that tries *filesystems* in order."""
    return FallbackFileSystem(*filesystems)
