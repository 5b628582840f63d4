import sys
import os
from tempfile import TemporaryDirectory
import pytest
# Ensure the project root is on sys.path for all tests
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

@pytest.fixture
def temp_dir():
    """Create a temporary directory for test outputs."""
    with TemporaryDirectory() as dir_path:
        yield dir_path

@pytest.fixture(autouse=True)
def clean_sf_environment(monkeypatch):
    """Keep SF_* overrides from the calling shell out of the CLI tests."""
    for name in ('SF_INPUT_FILE', 'SF_OUTPUT_FILE', 'SF_MARKER_CRATE', 'SF_VERBOSE'):
        monkeypatch.delenv(name, raising=False)
