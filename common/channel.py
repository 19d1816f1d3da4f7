#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import sys
import logging

from gtc.error import ChannelResolveError, ConfigError


logger = logging.getLogger(__name__)

AFFIRMATIVE = ('yes', 'y')


class ChannelManager:
    """Decides which channel to join.

    A channel given on the command line wins. Otherwise the configured
    channel is offered for change, or a new one is asked for and saved.

    Attributes
    ----------
    config_manager : `common.config.ConfigManager`
        Loaded configuration store.
    stdin : file-like
    stdout : file-like
    """

    def __init__(self, config_manager, stdin=None, stdout=None):
        self.config_manager = config_manager
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout

    @property
    def configured_channel(self):
        config = self.config_manager.config
        return config.twitch.channel if config is not None else ''

    @staticmethod
    def get_channel_from_args(args):
        """Extract a channel name from a command line argument.

        Args:
            args: Channel argument (str) or None

        Returns:
            Tuple of (channel, found)
        """
        channel = (args or '').strip().lstrip('#')
        if channel:
            return channel, True
        return '', False

    def get_channel(self, channel_arg=None):
        """Determine the channel to use.

        Raises
        ------
        `gtc.error.ChannelResolveError`
        """
        channel, found = self.get_channel_from_args(channel_arg)
        if found:
            logger.info('channel from command line: %s', channel)
            return channel
        return self.prompt_for_channel()

    def prompt_for_channel(self):
        """Interactively confirm or ask for the channel.

        Raises
        ------
        `gtc.error.ChannelResolveError`
        """
        current = self.configured_channel
        if current:
            self._say('Current Twitch channel is set to: %s' % current)
            self._say('Would you like to change the channel? (yes/no)')
            response = self._read_line().strip().lower()
            if response in AFFIRMATIVE:
                return self._ask_and_update_channel()
            return current

        self._say('No Twitch channel is currently configured.')
        return self._ask_and_update_channel()

    def _ask_and_update_channel(self):
        self._say('Please enter the Twitch channel name:')
        channel = self._read_line().strip()

        if not channel:
            self._say('Invalid channel name. No channel was set.')
            raise ChannelResolveError('empty channel name')

        try:
            self.config_manager.update('twitch.channel', channel)
        except ConfigError as ex:
            raise ChannelResolveError('failed to update channel: %s' % ex)

        self._say('Twitch channel set to: %s' % channel)
        return channel

    def _read_line(self):
        try:
            line = self.stdin.readline()
        except (OSError, ValueError) as ex:
            raise ChannelResolveError('error reading input: %s' % ex)
        if not line:
            raise ChannelResolveError('error reading input: EOF')
        return line

    def _say(self, text):
        print(text, file=self.stdout, flush=True)
