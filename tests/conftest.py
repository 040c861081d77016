import pytest

from assetvfs import MemoryTreeBuilder
from assetvfs._pytest_plugin import asset_dir, asset_tree  # noqa: F401


@pytest.fixture
def builder() -> MemoryTreeBuilder:
    """A fresh, unfrozen builder per test."""
    return MemoryTreeBuilder()
