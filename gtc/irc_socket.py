#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import asyncio
import logging
import collections

import aiohttp

from .error import ConnectionFailed, ConnectionClosed
from .irc import parse_line


class IRCSocket:
    """IRC over websocket connection.

    Attributes
    ----------
    url : `str`
        Websocket URL.
    websocket : `aiohttp.ClientWebSocketResponse`
    session : `aiohttp.ClientSession`
    closed : `bool`
    """
    logger = logging.getLogger(__name__)

    LINE_SEPARATOR = '\r\n'
    CLOSE_TYPES = (
        aiohttp.WSMsgType.CLOSE,
        aiohttp.WSMsgType.CLOSING,
        aiohttp.WSMsgType.CLOSED,
        aiohttp.WSMsgType.ERROR
    )

    def __init__(self, url, websocket, session=None, own_session=False):
        self.url = url
        self.websocket = websocket
        self.session = session
        self.own_session = own_session
        self.closed = False
        self.released = False
        self.lines = collections.deque()

    @classmethod
    async def connect(cls, url, session=None):
        """Connect to an IRC websocket gateway.

        Parameters
        ----------
        url : `str`
        session : `None` or `aiohttp.ClientSession`, optional
            Session to use. A new one is created and owned by the socket
            if `None`.

        Returns
        -------
        `IRCSocket`

        Raises
        ------
        `gtc.error.ConnectionFailed`
        """
        own_session = session is None
        if own_session:
            session = aiohttp.ClientSession()
        cls.logger.info('connect %s', url)
        try:
            websocket = await session.ws_connect(url, autoping=True)
        except (aiohttp.ClientError, OSError) as ex:
            if own_session:
                await session.close()
            raise ConnectionFailed('could not connect to %s: %r' % (url, ex))
        except asyncio.CancelledError:
            if own_session:
                await session.close()
            raise
        return cls(url, websocket, session, own_session)

    async def close(self):
        """Close the connection."""
        if self.released:
            return
        self.closed = True
        self.released = True
        self.logger.info('close %s', self.url)
        try:
            await self.websocket.close()
        finally:
            if self.own_session:
                await self.session.close()

    async def send(self, line):
        """Send one IRC line.

        Raises
        ------
        `gtc.error.ConnectionClosed`
        """
        if self.closed:
            raise ConnectionClosed('send on closed connection')
        self.logger.debug('send %s', line)
        try:
            await self.websocket.send_str(line + self.LINE_SEPARATOR)
        except (aiohttp.ClientError, ConnectionError) as ex:
            raise ConnectionClosed(ex)

    async def recv(self):
        """Receive the next IRC line.

        Returns
        -------
        `tuple` of (`gtc.irc.IRCMessage`, `str`)
            Parsed line and raw line.

        Raises
        ------
        `gtc.error.ConnectionClosed`
        `gtc.error.ProtocolError`
        """
        while not self.lines:
            if self.closed:
                raise ConnectionClosed('recv on closed connection')
            msg = await self.websocket.receive()
            if msg.type in self.CLOSE_TYPES:
                self.closed = True
                raise ConnectionClosed(
                    'connection closed: %s %r' % (msg.type, msg.extra)
                )
            if msg.type != aiohttp.WSMsgType.TEXT:
                self.logger.debug('recv: ignoring %s frame', msg.type)
                continue
            self.lines.extend(
                line for line in msg.data.split(self.LINE_SEPARATOR) if line
            )
        line = self.lines.popleft()
        self.logger.debug('recv %s', line)
        return parse_line(line), line
