#!/usr/bin/env python3
"""Twitch chat viewer - read-only terminal chat client.

Usage:
    python -m bots.viewer.bot [channel]

Keybindings:
    - Ctrl+C: Quit
"""

import sys
import asyncio
import logging
import argparse

from blessed import Terminal

from gtc import Chat, ChatClient, get_oauth_token
from gtc.error import GtcError, AuthError
from gtc.util import clear_screen

from common import ConfigManager, ChannelManager, setup_logging


logger = logging.getLogger('gtc.viewer')


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog='gtc',
        description='Read-only terminal viewer for Twitch chat'
    )
    parser.add_argument(
        'channel', nargs='?', default=None,
        help='channel to join (overrides the configured channel)'
    )
    return parser.parse_args(argv)


def fetch_auth_token(config, get_token=get_oauth_token):
    """Fetch an app token when credentials are configured

    The token is kept in memory only. Anonymous chat does not need it,
    so a failure is logged and ignored.

    Args:
        config: Loaded `Config`
        get_token: Token exchange function (client_id, client_secret)

    Returns:
        Token string or None
    """
    twitch = config.twitch
    if not (twitch.client_id and twitch.client_secret):
        return None
    try:
        twitch.auth_token = get_token(twitch.client_id, twitch.client_secret)
    except AuthError as ex:
        logger.warning('could not get auth token: %s', ex)
        return None
    logger.info('auth token acquired')
    return twitch.auth_token


def create_chat(config, term, stream=None):
    """Build the renderer from the runner settings."""
    return Chat(
        show_timestamp=config.runner.show_timestamps,
        log_messages=config.runner.log_messages,
        wrap_messages=config.runner.wrap_messages,
        term=term,
        stream=stream
    )


async def run_viewer(channel, chat, socket_io=None):
    """Connect and print chat until cancelled or the connection fails

    Args:
        channel: Channel name
        chat: `Chat` renderer
        socket_io: Optional connect coroutine (for testing)
    """
    kwargs = {}
    if socket_io is not None:
        kwargs['socket_io'] = socket_io
    client = ChatClient(channel, **kwargs)
    client.on('chat_message', chat.handle_message)
    await client.run()


def main(argv=None, socket_io=None, config_manager=None, stdin=None):
    """Main entry point for the viewer.

    Returns:
        int: Exit code (0 for success, 1 for error)
    """
    args = parse_args(argv)
    config_manager = config_manager or ConfigManager()

    try:
        config = config_manager.load()
    except GtcError as ex:
        print('Failed to load configuration: %s' % ex, file=sys.stderr)
        return 1

    setup_logging(config)
    for line in config.describe():
        logger.debug(line)

    try:
        channel = ChannelManager(config_manager, stdin=stdin).get_channel(
            args.channel
        )
    except GtcError as ex:
        print('Failed to get channel: %s' % ex, file=sys.stderr)
        return 1

    config = config_manager.config
    fetch_auth_token(config)

    term = Terminal(stream=sys.stdout)
    if term.is_a_tty:
        clear_screen(term, sys.stdout)
    print("Welcome to %s's chat!" % channel)
    print('Press Ctrl+C to exit.\n', flush=True)

    chat = create_chat(config, term)

    try:
        asyncio.run(run_viewer(channel, chat, socket_io=socket_io))
        return 0
    except KeyboardInterrupt:
        return 0
    except GtcError as ex:
        print('Error connecting to Twitch chat: %s' % ex, file=sys.stderr)
        return 1
    except Exception:
        logger.exception('Fatal error')
        return 1


if __name__ == '__main__':
    sys.exit(main())
