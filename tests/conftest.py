import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'textmod'
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))


from textmod.core.stdlib_logging import reset_logging
from textmod.data import clear_caches


@pytest.fixture(autouse=True)
def _isolate_textmod_state():
    """Reset package-level logging and data caches around every test."""
    clear_caches()
    reset_logging()
    yield
    reset_logging()
    clear_caches()


@pytest.fixture
def write_yaml(tmp_path: Path):
    """Write a mapping to a YAML file under tmp_path and return its path."""
    import yaml

    def _write(data, name: str = "textmod.yaml") -> Path:
        path = tmp_path / name
        path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
        return path

    return _write
