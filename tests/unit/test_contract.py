from assetvfs import (
    File,
    FileSystem,
    MemoryFileSystem,
    fallback,
    subdir,
)


def test_backends_satisfy_filesystem(asset_tree, asset_dir):
    for fs in (
        asset_tree,
        asset_dir,
        fallback(asset_tree, asset_dir),
        subdir(asset_dir, "static"),
        MemoryFileSystem(),
    ):
        assert isinstance(fs, FileSystem)


def test_handles_satisfy_file(asset_tree, asset_dir):
    for fs in (asset_tree, asset_dir):
        for path in ("index.html", "static"):
            with fs.open(path) as handle:
                assert isinstance(handle, File)


def test_plain_object_is_not_a_filesystem():
    assert not isinstance(object(), FileSystem)
