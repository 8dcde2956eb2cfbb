"""Test configuration and fixtures."""

import os
import tempfile

import pytest

# Test configuration; set before any practicelab import reads settings
TEST_LOG_DIR = os.path.join(tempfile.gettempdir(), "practicelab_test_logs")
os.environ.setdefault("LOG_DIR", TEST_LOG_DIR)
os.environ.setdefault("PRACTICELAB_DB_PATH", ":memory:")


@pytest.fixture(scope="function")
def test_db_path(tmp_path):
    """Provide a throwaway database file path."""
    return str(tmp_path / "test_practicelab.db")


@pytest.fixture(scope="function")
def test_log_dir(tmp_path):
    """Provide an empty log directory."""
    log_dir = tmp_path / "logs"
    log_dir.mkdir()
    return str(log_dir)
