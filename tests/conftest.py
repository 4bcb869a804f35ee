import sys
import uuid
from pathlib import Path

import pytest

from migreg.config import MigregConfig


@pytest.fixture(autouse=True)
def reset_config():
    MigregConfig.reset()
    yield
    MigregConfig.reset()


@pytest.fixture
def namespace():
    """A module namespace unique to the test; its modules are dropped afterwards."""
    name = f"migreg_test_{uuid.uuid4().hex[:8]}"
    yield name
    for module_name in [m for m in sys.modules if m == name or m.startswith(f"{name}.")]:
        del sys.modules[module_name]


@pytest.fixture
def migrations_dir(tmp_path: Path) -> Path:
    """Create temporary migrations directory."""
    migrations_dir = tmp_path / "migrations"
    migrations_dir.mkdir()
    return migrations_dir
