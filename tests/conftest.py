"""
Pytest configuration and shared fixtures for the hotrebuild test suite.

This module provides common fixtures, test utilities, and configuration
for all test modules in the hotrebuild project.
"""

import shutil
import sys
import tempfile
from pathlib import Path
from typing import List

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def cargo_project(temp_dir):
    """A minimal Cargo project layout: Cargo.toml, Cargo.lock and src/main.rs."""
    (temp_dir / "Cargo.toml").write_text('[package]\nname = "demo"\nversion = "0.1.0"\n')
    (temp_dir / "Cargo.lock").write_text("")
    (temp_dir / "src").mkdir()
    (temp_dir / "src" / "main.rs").write_text('fn main() { println!("hi"); }\n')
    return temp_dir


@pytest.fixture
def sample_config_data():
    """Config file contents covering every section."""
    return {
        "watch": ["src", "Cargo.toml"],
        "ignore": ["**/target/**", "**/*.tmp"],
        "include_ext": ["rs", "toml"],
        "exclude_ext": ["bak"],
        "debounce_ms": 100,
        "clear": False,
        "package": "demo",
        "bin": "demo",
        "features": ["a", "b"],
        "release": True,
        "pre_build": [["cargo", "fmt"]],
        "post_build": [],
        "pre_run": [["echo", "starting"]],
        "post_run": [["echo", "started"]],
        "on_build_fail": [["echo", "build failed"]],
    }


@pytest.fixture
def write_config(temp_dir):
    """Write a mapping to a TOML file and return its path."""
    import toml

    def _write(data, name: str = ".hotrebuild.toml") -> Path:
        path = temp_dir / name
        with open(path, "w") as f:
            toml.dump(data, f)
        return path

    return _write


# ============================================================================
# Command Fixtures
# ============================================================================


def python_argv(code: str, *args: str) -> List[str]:
    """Argv that runs a Python snippet with the test interpreter."""
    return [sys.executable, "-c", code, *args]


@pytest.fixture
def ok_argv():
    return python_argv("raise SystemExit(0)")


@pytest.fixture
def fail_argv():
    return python_argv("raise SystemExit(1)")


@pytest.fixture
def touch_argv():
    """Factory for an argv that creates the given file."""
    def _touch(path: Path) -> List[str]:
        return python_argv("import pathlib, sys; pathlib.Path(sys.argv[1]).touch()", str(path))

    return _touch


# ============================================================================
# Test Utilities
# ============================================================================


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock():
    return FakeClock()


class RecordingRunner:
    """
    Command runner that records argv lists and returns scripted exit codes.

    ``results`` maps the first argv element to an exit code, or to an
    exception instance to raise. Unlisted commands exit 0.
    """

    def __init__(self, results=None):
        self.results = results or {}
        self.calls: List[List[str]] = []

    def __call__(self, argv) -> int:
        self.calls.append(list(argv))
        result = self.results.get(argv[0], 0)
        if isinstance(result, BaseException):
            raise result
        return result

    def programs(self) -> List[str]:
        return [argv[0] for argv in self.calls]


@pytest.fixture
def recording_runner():
    return RecordingRunner
