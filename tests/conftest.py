"""
Shared pytest configuration and fixtures for godot-runner tests.
"""

import pytest
import stat
import sys
from pathlib import Path

# Add the library directory to Python path so tests run without installing
PROJECT_ROOT = Path(__file__).parent.parent
LIB_PATH = PROJECT_ROOT / "lib"
if str(LIB_PATH) not in sys.path:
    sys.path.insert(0, str(LIB_PATH))


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "e2e: End-to-end tests requiring a real Godot install")
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (spawn real processes)")


def pytest_collection_modifyitems(config, items):
    """Skip E2E tests unless --run-e2e is given."""
    if not config.getoption("--run-e2e", default=False):
        skip_e2e = pytest.mark.skip(reason="E2E tests disabled (use --run-e2e to enable)")
        for item in items:
            if "e2e" in item.keywords:
                item.add_marker(skip_e2e)


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--run-e2e",
        action="store_true",
        default=False,
        help="Run end-to-end tests that launch a real Godot binary"
    )


# ============================================================================
# Shared Fixtures
# ============================================================================

@pytest.fixture
def godot_dirs(tmp_path):
    """
    Create a Godot project directory and a cargo target directory that live
    in different branches of the same tree.

    Returns:
        (godot_project_path, target_path)
    """
    godot_project_path = tmp_path / "home" / "user" / "projects" / "godot_project_path"
    godot_project_path.mkdir(parents=True)
    target_path = tmp_path / "home" / "user" / ".cache" / "cargo" / "target"
    target_path.mkdir(parents=True)
    return godot_project_path, target_path


@pytest.fixture
def no_godot_env(monkeypatch):
    """Remove Godot override variables inherited from the developer's shell."""
    monkeypatch.delenv("godot", raising=False)
    monkeypatch.delenv("GODOT", raising=False)


FAKE_GODOT_SCRIPT = """#!/bin/sh
# Stand-in for the Godot binary: records each invocation in $FAKE_GODOT_LOG.
if [ -f rust.gdextension ]; then
    echo "gdextension present: $*" >> "$FAKE_GODOT_LOG"
else
    echo "gdextension missing: $*" >> "$FAKE_GODOT_LOG"
fi
if [ "$1" = "--import" ]; then
    mkdir -p .godot
    exit "${FAKE_GODOT_IMPORT_EXIT:-0}"
fi
if [ -n "$FAKE_GODOT_KILL" ]; then
    kill -9 $$
fi
exit "${FAKE_GODOT_EXIT:-0}"
"""


@pytest.fixture
def fake_godot(tmp_path, monkeypatch, no_godot_env):
    """
    Install a fake `godot` shell script and point $godot at it.

    Behaviour is controlled with environment variables:
        FAKE_GODOT_IMPORT_EXIT - exit code for `--import` runs
        FAKE_GODOT_EXIT - exit code for other runs
        FAKE_GODOT_KILL - if set, non-import runs kill themselves with SIGKILL

    Returns:
        Path to the log file listing each invocation's arguments, one per line
    """
    if sys.platform == "win32":
        pytest.skip("Fake godot binary is a POSIX shell script")

    bin_dir = tmp_path / "fake-bin"
    bin_dir.mkdir()
    script = bin_dir / "godot"
    script.write_text(FAKE_GODOT_SCRIPT, encoding="utf-8")
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)

    log_path = tmp_path / "godot-calls.log"
    monkeypatch.setenv("godot", str(script))
    monkeypatch.setenv("FAKE_GODOT_LOG", str(log_path))
    return log_path
