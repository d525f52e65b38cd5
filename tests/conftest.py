import sys
from pathlib import Path

import pytest

# Ensure src package and test helpers are importable without installation
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if SRC.exists():
    sys.path.insert(0, str(SRC))
sys.path.insert(0, str(Path(__file__).resolve().parent))

from helpers import write_jar  # noqa: E402


@pytest.fixture
def make_jar(tmp_path: Path):
    def _make(name: str, entries):
        return write_jar(tmp_path / name, entries)

    return _make
