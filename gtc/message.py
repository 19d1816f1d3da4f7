#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import logging
from datetime import datetime, timezone


logger = logging.getLogger(__name__)

ACTION_PREFIX = '\x01ACTION '
ACTION_SUFFIX = '\x01'


def parse_badges(raw):
    """Parse a 'badges' tag value.

    Parameters
    ----------
    raw : `str`
        'name/version,name/version'

    Returns
    -------
    `dict` of (`str`, `int`)
        Badge name to level, in tag order. Non-numeric versions
        map to level 0.

    Examples
    --------
    >>> parse_badges('subscriber/12,premium/1')
    {'subscriber': 12, 'premium': 1}
    >>> parse_badges('predictions/blue-1')
    {'predictions': 0}
    """
    badges = {}
    for item in (raw or '').split(','):
        if not item:
            continue
        name, _, version = item.partition('/')
        try:
            badges[name] = int(version)
        except ValueError:
            badges[name] = 0
    return badges


def _parse_time(value):
    try:
        return datetime.fromtimestamp(int(value) / 1000, tz=timezone.utc)
    except (TypeError, ValueError):
        return datetime.now(timezone.utc)


class ChatMessage:
    """Inbound chat message.

    Attributes
    ----------
    display_name : `str`
        Sender display name.
    color : `str`
        Sender colour, hex. Empty if the sender never picked one.
    badges : `dict` of (`str`, `int`)
        Badge name to level, in the order the server sent them.
    message : `str`
        Message body.
    first_message : `bool`
        Sender's first message in this channel.
    channel : `str`
    login : `str`
    user_id : `str`
    id : `str`
    action : `bool`
        '/me' message.
    bits : `int`
    time : `datetime.datetime`
    tags : `dict` of (`str`, `str`)
        All IRC tags as received.
    raw : `str`
    """

    def __init__(self, display_name, message, color='', badges=None,
                 first_message=False, channel='', login='', user_id='',
                 id='', action=False, bits=0, time=None, tags=None, raw=''):
        self.display_name = display_name
        self.message = message
        self.color = color or ''
        self.badges = dict(badges or {})
        self.first_message = bool(first_message)
        self.channel = channel
        self.login = login
        self.user_id = user_id
        self.id = id
        self.action = action
        self.bits = bits
        self.time = time if time is not None else datetime.now(timezone.utc)
        self.tags = dict(tags or {})
        self.raw = raw

    def __repr__(self):
        return '<ChatMessage #%s %s: %r>' % (
            self.channel, self.display_name, self.message
        )

    @classmethod
    def from_irc(cls, msg, raw=''):
        """Create a chat message from a PRIVMSG.

        Parameters
        ----------
        msg : `gtc.irc.IRCMessage`
        raw : `str`, optional
            Raw IRC line.

        Returns
        -------
        `ChatMessage`
        """
        tags = msg.tags
        body = msg.trailing
        action = body.startswith(ACTION_PREFIX)
        if action:
            body = body[len(ACTION_PREFIX):]
            if body.endswith(ACTION_SUFFIX):
                body = body[:-len(ACTION_SUFFIX)]
        login = msg.nick
        try:
            bits = int(tags.get('bits', 0))
        except ValueError:
            bits = 0
        return cls(
            display_name=tags.get('display-name') or login,
            message=body,
            color=tags.get('color', ''),
            badges=parse_badges(tags.get('badges', '')),
            first_message=tags.get('first-msg') == '1',
            channel=msg.channel,
            login=login,
            user_id=tags.get('user-id', ''),
            id=tags.get('id', ''),
            action=action,
            bits=bits,
            time=_parse_time(tags.get('tmi-sent-ts')),
            tags=tags,
            raw=raw
        )

    def to_dict(self):
        """JSON-safe representation for the message log."""
        return {
            'id': self.id,
            'channel': self.channel,
            'user': {
                'id': self.user_id,
                'name': self.login,
                'display_name': self.display_name,
                'color': self.color,
                'badges': dict(self.badges),
            },
            'message': self.message,
            'action': self.action,
            'first_message': self.first_message,
            'bits': self.bits,
            'time': self.time.isoformat(),
            'tags': dict(self.tags),
            'raw': self.raw,
        }
