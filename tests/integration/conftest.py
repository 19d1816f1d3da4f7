"""
Shared fixtures for integration tests.

Integration tests run the viewer end to end with a real configuration
store in a temporary directory and a scripted socket in place of the
network.
"""

import logging
import pytest

from common.config import ConfigManager


@pytest.fixture(autouse=True)
def restore_root_logger():
    """The viewer configures the root logger; undo it after each test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def viewer_config(config_dir):
    """Configuration store with timestamps and message logging enabled."""
    manager = ConfigManager(config_dir)
    manager.load()
    manager.update('runner.timestamps', True)
    manager.update('runner.log_messages', True)
    return ConfigManager(config_dir)
