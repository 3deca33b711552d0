# tests/conftest.py
"""Shared pytest fixtures for debugsim tests.

This file provides common fixtures used across all test modules,
following the bottom-up testing strategy where foundation components
are tested with real dependencies (real store, reducers and plugin
manager) wherever possible.
"""

import tempfile
from pathlib import Path
from typing import Generator

import pytest
import yaml

from debugsim.harness import PlatformHarness
from debugsim.logging_system import get_instance
from debugsim.plugins.definitions import client_plugin, device_plugin


# ----------------------------------------------------------------
# Configuration fixtures
# ----------------------------------------------------------------
@pytest.fixture
def temp_config_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test configuration files.

    Yields:
        Path to temporary configuration directory
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        config_path = Path(tmpdir)
        yield config_path


@pytest.fixture
def write_config_file(temp_config_dir):
    """Factory fixture writing a YAML file into the temp config directory.

    Returns:
        Function (filename, data) -> Path
    """

    def _write(filename: str, data: dict) -> Path:
        path = temp_config_dir / filename
        with open(path, "w") as f:
            yaml.safe_dump(data, f)
        return path

    return _write


# ----------------------------------------------------------------
# Plugin fixtures
# ----------------------------------------------------------------
@pytest.fixture
def sample_plugins() -> list:
    """Provide a small mixed plugin catalog.

    Returns:
        Two client plugins and two device plugins. "DeviceLogs" is in the
        default enabled device plugin set, "CPU" is not.
    """
    return [
        client_plugin("Network", title="Network"),
        client_plugin("Layout", title="Layout"),
        device_plugin("DeviceLogs", title="Logs"),
        device_plugin("CPU", title="CPU", supported_os=("Android",)),
    ]


# ----------------------------------------------------------------
# Logger fixtures
# ----------------------------------------------------------------
@pytest.fixture
def platform_logger():
    """Provide the shared platform logger with an empty event trail."""
    logger = get_instance()
    logger.clear_events()
    yield logger
    logger.clear_events()


# ----------------------------------------------------------------
# Harness fixtures
# ----------------------------------------------------------------
@pytest.fixture
async def harness():
    """Provide an initialised harness with no plugins registered."""
    h = PlatformHarness()
    await h.init()
    yield h
    await h.destroy()


@pytest.fixture
async def harness_with_plugins(sample_plugins):
    """Provide an initialised harness with the sample plugins registered."""
    h = PlatformHarness()
    await h.init(plugins=sample_plugins)
    yield h
    await h.destroy()
