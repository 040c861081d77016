import posixpath


def assert_preorder(paths: list[str]) -> None:
    """Every entry after the walk root was preceded by its parent directory."""
    seen = {paths[0]}
    for path in paths[1:]:
        parent = posixpath.dirname(path) or "."
        assert parent in seen, f"{path!r} visited before its parent {parent!r}"
        seen.add(path)


def assert_visited_once(paths: list[str], expected: set[str]) -> None:
    assert len(paths) == len(set(paths)), f"duplicate visits: {paths}"
    assert set(paths) == expected
