import sys
from pathlib import Path

import pytest

# Add src to sys.path so we can import prompt_locator
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from prompt_locator.config import ExtractionSettings  # noqa: E402


@pytest.fixture
def settings():
    """Default settings, independent of the environment."""
    return ExtractionSettings()
