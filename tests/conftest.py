"""
Pytest configuration and fixtures.

Shared fixtures for all tests.
"""

import pytest
import socket
import sys
from pathlib import Path
import tempfile
import shutil

project_root = Path(__file__).parent.parent


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests."""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path)


@pytest.fixture
def marker_path(temp_dir):
    """Marker location isolated from the real temp-dir marker."""
    return temp_dir / "roosevelt_validator_pid.txt"


@pytest.fixture
def kill_command():
    """A kill program that reports what it did and exits cleanly."""
    return (sys.executable, "-c", "print('validator killed')")


@pytest.fixture
def closed_port():
    """A localhost port with nothing listening on it."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        port = s.getsockname()[1]
    return port


@pytest.fixture
def kill_script(temp_dir):
    """An existing kill program file for startup checks."""
    script = temp_dir / "kill_validator.py"
    script.write_text("print('validator killed')\n")
    return script
