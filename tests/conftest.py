"""
Pytest configuration and fixtures for blobfs tests.

Every fixture builds its trees under pytest's tmp_path, so tests never
touch a shared location.
"""
import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from blobfs.storage import LocalContainer, LocalLocation, LocationConfig
from tests.utils.trees import SAMPLE_TREE, make_tree


# ============================================
# Test Fixtures
# ============================================

@pytest.fixture
def location_root(tmp_path: Path) -> Path:
    """An empty location directory."""
    root = tmp_path / "blobs"
    root.mkdir()
    return root


@pytest.fixture
def location(location_root: Path) -> LocalLocation:
    """A local location over location_root."""
    return LocalLocation(LocationConfig(path=str(location_root)))


@pytest.fixture
def container(location: LocalLocation) -> LocalContainer:
    """An empty container named 'photos'."""
    return location.create_container("photos")


@pytest.fixture
def sample_container(container: LocalContainer) -> LocalContainer:
    """The 'photos' container holding SAMPLE_TREE."""
    make_tree(Path(container.path), SAMPLE_TREE)
    return container


# ============================================
# Pytest Configuration
# ============================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "fast: Fast unit tests (small trees only)"
    )
