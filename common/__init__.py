"""Common utilities for the gtc viewer."""
from .config import (
    Config, ConfigManager, configure_logger, setup_logging
)
from .channel import ChannelManager

__all__ = [
    'Config', 'ConfigManager', 'configure_logger', 'setup_logging',
    'ChannelManager'
]
