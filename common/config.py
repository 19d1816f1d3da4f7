#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import os
import sys
import copy
import logging
import tempfile
from pathlib import Path

import yaml

from gtc.error import ConfigError


logger = logging.getLogger(__name__)

CONFIG_NAME = 'config.yaml'

DEFAULT_CONFIG = {
    'port': 8080,
    'app_name': 'gtc',
    'log_level': 'warning',
    'log_file': '',
    'twitch': {
        'client_id': '',
        'client_secret': '',
        'channel': '',
    },
    'runner': {
        'timestamps': False,
        'log_messages': False,
        'wrap_messages': False,
    },
}


def default_config_dir():
    """Per-user configuration directory (~/.config/gtc)."""
    return Path.home() / '.config' / 'gtc'


def configure_logger(logger,
                     log_file=None,
                     log_format=None,
                     log_level=logging.INFO):
    """Configure a logger with a file or stream handler

    Args:
        logger: Logger instance or logger name string
        log_file: File path string or file-like object (None for stderr)
        log_format: Format string for log messages
        log_level: Logging level (e.g., logging.INFO, logging.DEBUG)

    Returns:
        Configured logger instance
    """
    # Create file handler if path string, otherwise stream handler
    if isinstance(log_file, str):
        handler = logging.FileHandler(
            log_file,
            mode='a',
            encoding='utf-8',
            errors='replace'
        )
    else:
        handler = logging.StreamHandler(log_file)  # Default to stderr if None

    # Get logger by name if string provided
    if isinstance(logger, str):
        logger = logging.getLogger(logger)

    handler.setFormatter(logging.Formatter(log_format))
    logger.addHandler(handler)
    logger.setLevel(log_level)

    return logger


def setup_logging(config):
    """Configure the root logger from the application configuration

    Chat lines own stdout, so diagnostics go to stderr or a log file.

    Args:
        config: Loaded `Config`

    Returns:
        Root logger
    """
    level = getattr(logging, config.log_level.upper(), None)
    if not isinstance(level, int):
        level = logging.WARNING
    return configure_logger(
        logging.getLogger(),
        log_file=config.log_file or None,
        log_format='[%(asctime).19s] [%(name)s] [%(levelname)s] %(message)s',
        log_level=level
    )


def _merge(base, override):
    """Recursively overlay `override` on a copy of `base`."""
    res = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(res.get(key), dict):
            res[key] = _merge(res[key], value)
        else:
            res[key] = value
    return res


def _set_dotted(data, key, value):
    """Set 'a.b.c' in a nested dict, creating mappings as needed."""
    parts = key.split('.')
    node = data
    for part in parts[:-1]:
        child = node.get(part)
        if not isinstance(child, dict):
            child = node[part] = {}
        node = child
    node[parts[-1]] = value


TRUE_STRINGS = frozenset(('1', 't', 'T', 'true', 'TRUE', 'True'))
FALSE_STRINGS = frozenset(('0', 'f', 'F', 'false', 'FALSE', 'False'))


def _as_bool(value, key):
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        text = value.strip()
        if text in TRUE_STRINGS:
            return True
        if text in FALSE_STRINGS:
            return False
    raise ConfigError('%s: expected a boolean, got %r' % (key, value))


def _as_int(value, key):
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise ConfigError('%s: expected an integer, got %r' % (key, value))


def _as_str(value, key):
    if value is None:
        return ''
    if isinstance(value, (str, int)) and not isinstance(value, bool):
        return str(value)
    raise ConfigError('%s: expected a string, got %r' % (key, value))


def _format_bool(value):
    return 'true' if value else 'false'


class TwitchConfig:
    """Twitch credentials and channel.

    `auth_token` is filled in at runtime and never written to disk.
    """

    def __init__(self, client_id='', client_secret='', channel='',
                 auth_token=''):
        self.client_id = client_id
        self.client_secret = client_secret
        self.channel = channel
        self.auth_token = auth_token

    @classmethod
    def from_dict(cls, data):
        return cls(
            client_id=_as_str(data.get('client_id'), 'twitch.client_id'),
            client_secret=_as_str(data.get('client_secret'),
                                  'twitch.client_secret'),
            channel=_as_str(data.get('channel'), 'twitch.channel')
        )


class RunnerConfig:
    """Display options."""

    def __init__(self, show_timestamps=False, log_messages=False,
                 wrap_messages=False):
        self.show_timestamps = show_timestamps
        self.log_messages = log_messages
        self.wrap_messages = wrap_messages

    @classmethod
    def from_dict(cls, data):
        return cls(
            show_timestamps=_as_bool(data.get('timestamps'),
                                     'runner.timestamps'),
            log_messages=_as_bool(data.get('log_messages'),
                                  'runner.log_messages'),
            wrap_messages=_as_bool(data.get('wrap_messages'),
                                   'runner.wrap_messages')
        )


class Config:
    """Application configuration.

    Attributes
    ----------
    port : `int`
        Not used by the viewer.
    app_name : `str`
    log_level : `str`
    log_file : `str`
        Empty for stderr.
    twitch : `TwitchConfig`
    runner : `RunnerConfig`
    """

    def __init__(self, port=8080, app_name='gtc', log_level='warning',
                 log_file='', twitch=None, runner=None):
        self.port = port
        self.app_name = app_name
        self.log_level = log_level
        self.log_file = log_file
        self.twitch = twitch if twitch is not None else TwitchConfig()
        self.runner = runner if runner is not None else RunnerConfig()

    @classmethod
    def from_dict(cls, data):
        """Decode a merged configuration mapping.

        Raises
        ------
        `gtc.error.ConfigError`
        """
        for section in ('twitch', 'runner'):
            if not isinstance(data.get(section), dict):
                raise ConfigError('%s: expected a mapping' % section)
        return cls(
            port=_as_int(data.get('port'), 'port'),
            app_name=_as_str(data.get('app_name'), 'app_name'),
            log_level=_as_str(data.get('log_level'), 'log_level'),
            log_file=_as_str(data.get('log_file'), 'log_file'),
            twitch=TwitchConfig.from_dict(data['twitch']),
            runner=RunnerConfig.from_dict(data['runner'])
        )

    def describe(self):
        """Human-readable summary, one setting per line."""
        return [
            'Application Configuration:',
            'App Name: %s' % self.app_name,
            'Port: %d' % self.port,
            'Twitch Client ID: %s' % self.twitch.client_id,
            'Twitch Channel: %s' % self.twitch.channel,
            'Show Timestamps: %s' % _format_bool(self.runner.show_timestamps),
            'Log Messages: %s' % _format_bool(self.runner.log_messages),
        ]


class ConfigManager:
    """Persistent YAML configuration.

    Attributes
    ----------
    config_dir : `pathlib.Path`
    config_path : `pathlib.Path`
    config : `None` or `Config`
        Last loaded configuration.
    """

    def __init__(self, config_dir=None):
        self.config_dir = Path(config_dir) if config_dir else default_config_dir()
        self.config_path = self.config_dir / CONFIG_NAME
        self.config = None

    def load(self):
        """Load the configuration, creating the file with defaults on first run.

        Returns
        -------
        `Config`

        Raises
        ------
        `gtc.error.ConfigError`
        """
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
        except OSError as ex:
            raise ConfigError('failed to create config directory: %s' % ex)

        if not self.config_path.exists():
            self._write(DEFAULT_CONFIG)
            logger.info('Created default configuration file at %s',
                        self.config_path)

        data = _merge(DEFAULT_CONFIG, self._read())
        self.config = Config.from_dict(data)
        return self.config

    def update(self, key, value):
        """Set a single dotted key, save, and reload.

        Parameters
        ----------
        key : `str`
            Dotted path, e.g. 'twitch.channel'.
        value : `object`

        Returns
        -------
        `Config`
            Reloaded configuration (also stored in `config`).

        Raises
        ------
        `gtc.error.ConfigError`
        """
        if not self.config_path.exists():
            raise ConfigError('error reading config: %s does not exist'
                              % self.config_path)
        data = self._read()
        _set_dotted(data, key, value)
        Config.from_dict(_merge(DEFAULT_CONFIG, data))
        self._write(data)
        logger.info('update %s', key)
        return self.load()

    def print(self, file=None):
        """Print the current configuration summary."""
        config = self.config if self.config is not None else self.load()
        for line in config.describe():
            print(line, file=file or sys.stdout)

    def _read(self):
        try:
            with open(self.config_path, 'r', encoding='utf-8') as fp:
                data = yaml.safe_load(fp)
        except OSError as ex:
            raise ConfigError('error reading config: %s' % ex)
        except yaml.YAMLError as ex:
            raise ConfigError('unable to decode configuration: %s' % ex)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError('unable to decode configuration: '
                              'expected a mapping, got %s'
                              % type(data).__name__)
        return data

    def _write(self, data):
        """Write the whole document atomically (temp file + rename)."""
        fd, tmp_path = None, None
        try:
            fd, tmp_path = tempfile.mkstemp(
                prefix='.config-', suffix='.yaml', dir=str(self.config_dir)
            )
            with os.fdopen(fd, 'w', encoding='utf-8') as fp:
                fd = None
                yaml.safe_dump(data, fp, default_flow_style=False,
                               sort_keys=True)
            os.replace(tmp_path, self.config_path)
            tmp_path = None
        except (OSError, yaml.YAMLError) as ex:
            raise ConfigError('failed to write config file: %s' % ex)
        finally:
            if fd is not None:
                os.close(fd)
            if tmp_path is not None and os.path.exists(tmp_path):
                os.remove(tmp_path)
