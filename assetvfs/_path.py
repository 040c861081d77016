import posixpath


def clean_path(path: str) -> str:
    """Return *path* cleaned and relative: no leading separator, ``.`` for self.

    An empty path stays empty so that backends can reject it.
    """
    converted = path.replace("\\", "/")
    if not converted:
        return ""
    return posixpath.normpath(converted).lstrip("/")


def join_path(*parts: str) -> str:
    """Join non-empty *parts* with ``/`` and clean the result."""
    joined = "/".join(p for p in parts if p)
    if not joined:
        return ""
    return clean_path(joined) or "."


def same_path(a: object, b: object) -> bool:
    if not isinstance(a, str) or not isinstance(b, str):
        return False
    return (clean_path(a) or ".") == (clean_path(b) or ".")


def split_path(npath: str) -> list[str]:
    return [p for p in npath.split("/") if p]
