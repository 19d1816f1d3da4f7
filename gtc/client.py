#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import random
import asyncio
import inspect
import logging
import collections

from .error import (
    LoginError, JoinError, TransportError, ConnectionClosed
)
from .irc import format_line
from .irc_socket import IRCSocket
from .message import ChatMessage


class ChatClient:
    """Anonymous Twitch chat client.

    Receives chat from one channel without logging in as a user.

    Attributes
    ----------
    channel : `str`
        Channel name, lower case, without '#'.
    server : `str`
        IRC websocket URL.
    nick : `str`
        Anonymous nick.
    socket_io : `function` (url)
        Connect coroutine returning a `gtc.irc_socket.IRCSocket`.
    socket : `None` or `gtc.irc_socket.IRCSocket`
        Connection.
    joined : `bool`
        Whether the server confirmed the channel join.
    last_line : `str`
        Last raw line received.
    handlers : `collections.defaultdict` of (`str`, `list` of `function`)
        Event handlers.
    """
    logger = logging.getLogger(__name__)

    SERVER_URL = 'wss://irc-ws.chat.twitch.tv:443'
    ANONYMOUS_PASS = 'SCHMOOPIIE'
    ANONYMOUS_NICK = 'justinfan%05d'
    CAPABILITIES = ('twitch.tv/tags', 'twitch.tv/commands')

    LOGIN_FAILURES = (
        'login authentication failed',
        'login unsuccessful',
        'improperly formatted auth',
    )
    JOIN_FAILURES = frozenset((
        'msg_channel_suspended',
        'msg_banned',
        'msg_channel_blocked',
        'tos_ban',
        'invalid_user',
    ))

    EVENT_LOG_LEVEL = {
        'privmsg': logging.DEBUG,
        'chat_message': logging.DEBUG,
        'ping': logging.DEBUG,
        'pong': logging.DEBUG,
        'usernotice': logging.DEBUG,
        'clearchat': logging.DEBUG,
        'clearmsg': logging.DEBUG,
    }

    EVENT_LOG_LEVEL_DEFAULT = logging.INFO

    def __init__(self, channel, server=SERVER_URL, nick=None,
                 socket_io=IRCSocket.connect):
        """
        Parameters
        ----------
        channel : `str`
            Channel name, with or without '#'.
        server : `str`, optional
            IRC websocket URL.
        nick : `None` or `str`, optional
            Anonymous nick (default: random 'justinfanNNNNN').
        socket_io : `function` (url), optional
            Connect coroutine.
        """
        self.channel = channel.strip().lstrip('#').lower()
        self.server = server
        self.nick = nick or self.ANONYMOUS_NICK % random.randint(1, 99999)
        self.socket_io = socket_io
        self.socket = None
        self.joined = False
        self.last_line = ''
        self.handlers = collections.defaultdict(list)

        for attr in dir(self):
            if attr.startswith('_on_'):
                self.on(attr[4:], getattr(self, attr))

    async def _on_ping(self, _, msg):
        await self.send('PONG', msg.trailing or 'tmi.twitch.tv')

    async def _on_join(self, _, msg):
        if msg.nick.lower() != self.nick.lower():
            return
        if msg.channel != self.channel:
            return
        self.logger.info('joined #%s', self.channel)
        self.joined = True
        await self.trigger('joined', self.channel)

    def _on_notice(self, _, msg):
        text = msg.trailing
        msg_id = msg.tags.get('msg-id', '')
        if not self.joined and text.lower().startswith(self.LOGIN_FAILURES):
            raise LoginError(text)
        if msg_id in self.JOIN_FAILURES:
            raise JoinError('#%s: %s' % (self.channel, text or msg_id))
        self.logger.info('notice: %s', text)

    def _on_reconnect(self, _, msg):
        raise ConnectionClosed('server requested reconnect')

    async def _on_privmsg(self, _, msg):
        message = ChatMessage.from_irc(msg, self.last_line)
        await self.trigger('chat_message', message)

    async def send(self, command, *params):
        """Send an IRC command.

        Raises
        ------
        `gtc.error.ConnectionClosed`
        """
        if self.socket is None:
            raise ConnectionClosed('not connected')
        await self.socket.send(format_line(command, *params))

    async def disconnect(self):
        """Disconnect.
        """
        self.logger.info('disconnect %s', self.server)
        if self.socket is None:
            self.logger.info('already disconnected')
            return
        try:
            await self.socket.close()
        except Exception as ex:
            self.logger.error('socket.close(): %s: %r', self.server, ex)
            raise
        finally:
            self.socket = None
            self.joined = False

    async def connect(self):
        """Connect to the server.

        Raises
        ------
        `gtc.error.ConnectionFailed`
        """
        await self.disconnect()
        self.logger.info('connect %s', self.server)
        self.socket = await self.socket_io(self.server)

    async def login(self):
        """Connect, log in anonymously, join the channel.

        The join is confirmed asynchronously by a JOIN echo,
        see `joined`.

        Raises
        ------
        `gtc.error.TransportError`
        """
        await self.connect()
        await self.send('CAP', 'REQ', ' '.join(self.CAPABILITIES))
        await self.send('PASS', self.ANONYMOUS_PASS)
        await self.send('NICK', self.nick)
        self.logger.info('join channel #%s as %s', self.channel, self.nick)
        await self.send('JOIN', '#' + self.channel)

    async def run(self):
        """Main loop.

        Runs until cancelled or until the connection fails; connection
        errors are not retried.

        Raises
        ------
        `gtc.error.TransportError`
        `gtc.error.LoginError`
        `gtc.error.JoinError`
        """
        try:
            await self.login()
            while True:
                msg, self.last_line = await self.socket.recv()
                await self.trigger(msg.command.lower(), msg)
        except asyncio.CancelledError:
            self.logger.info('cancelled')
            raise
        finally:
            await self.disconnect()

    def on(self, event, *handlers):
        """Add event handlers.

        Parameters
        ----------
        event : `str`
            Event name.
        handlers : `list` of `function`
            Event handlers.
        """
        ev_handlers = self.handlers[event]
        for handler in handlers:
            if handler not in ev_handlers:
                ev_handlers.append(handler)
                self.logger.debug('on: %s %s', event, handler)
            else:
                self.logger.warning('on: handler exists: %s %s', event, handler)
        return self

    def off(self, event, *handlers):
        """Remove event handlers.

        Parameters
        ----------
        event : `str`
            Event name.
        handlers : `list` of `function`
            Event handlers.
        """
        ev_handlers = self.handlers[event]
        for handler in handlers:
            try:
                ev_handlers.remove(handler)
                self.logger.debug('off: %s %s', event, handler)
            except ValueError:
                self.logger.warning(
                    'off: handler not found: %s %s',
                    event, handler
                )
        return self

    async def trigger(self, event, data):
        """Trigger an event.

        Parameters
        ----------
        event : `str`
            Event name.
        data : `object`
            Event data.

        Raises
        ------
        `gtc.error.LoginError`
        `gtc.error.JoinError`
        `gtc.error.TransportError`
        """
        level = self.EVENT_LOG_LEVEL.get(event, self.EVENT_LOG_LEVEL_DEFAULT)
        self.logger.log(level, 'trigger: %s %s', event, data)
        try:
            for handler in self.handlers[event]:
                if inspect.iscoroutinefunction(handler):
                    stop = await handler(event, data)
                else:
                    stop = handler(event, data)
                if stop:
                    break
        except (asyncio.CancelledError, LoginError, JoinError, TransportError):
            raise
        except Exception as ex: # pylint: disable=broad-except
            self.logger.error('trigger %s %s: %r', event, data, ex)
            if event != 'error':
                await self.trigger('error', {
                    'event': event,
                    'data': data,
                    'error': ex
                })
