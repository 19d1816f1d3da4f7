#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""IRCv3 line codec for Twitch chat."""
from collections import namedtuple

from .error import ProtocolError


TAG_ESCAPES = {
    ':': ';',
    's': ' ',
    '\\': '\\',
    'r': '\r',
    'n': '\n',
}


def unescape_tag_value(value):
    """Unescape an IRCv3 message tag value.

    Examples
    --------
    >>> unescape_tag_value(r'hello\\sworld\\:')
    'hello world;'
    """
    if '\\' not in value:
        return value
    res = []
    chars = iter(value)
    for ch in chars:
        if ch != '\\':
            res.append(ch)
            continue
        nxt = next(chars, '')
        res.append(TAG_ESCAPES.get(nxt, nxt))
    return ''.join(res)


def parse_tags(raw):
    """Parse 'key=value;key2=value2' into an ordered `dict`."""
    tags = {}
    for item in raw.split(';'):
        if not item:
            continue
        key, _, value = item.partition('=')
        tags[key] = unescape_tag_value(value)
    return tags


class IRCMessage(namedtuple('IRCMessage', 'tags prefix command params')):
    """Parsed IRC line.

    Attributes
    ----------
    tags : `dict` of (`str`, `str`)
    prefix : `str`
        'nick!user@host' or server name, may be empty.
    command : `str`
        Upper-case command or numeric reply.
    params : `tuple` of `str`
    """
    __slots__ = ()

    @property
    def nick(self):
        return self.prefix.split('!', 1)[0]

    @property
    def trailing(self):
        return self.params[-1] if self.params else ''

    @property
    def channel(self):
        if self.params and self.params[0].startswith('#'):
            return self.params[0][1:]
        return ''


def parse_line(line):
    """Parse one IRC line.

    Parameters
    ----------
    line : `str`
        Line without the trailing CRLF.

    Returns
    -------
    `IRCMessage`

    Raises
    ------
    `gtc.error.ProtocolError`
        If the line is empty or has no command.
    """
    rest = line.rstrip('\r\n')
    tags = {}
    prefix = ''

    if rest.startswith('@'):
        raw_tags, _, rest = rest[1:].partition(' ')
        tags = parse_tags(raw_tags)
        rest = rest.lstrip(' ')

    if rest.startswith(':'):
        prefix, _, rest = rest[1:].partition(' ')
        rest = rest.lstrip(' ')

    trailing = None
    if ' :' in rest:
        rest, trailing = rest.split(' :', 1)
    elif rest.startswith(':'):
        rest, trailing = '', rest[1:]

    parts = rest.split()
    if not parts:
        raise ProtocolError('invalid line: %r' % line)

    command = parts[0].upper()
    params = parts[1:]
    if trailing is not None:
        params.append(trailing)
    return IRCMessage(tags, prefix, command, tuple(params))


def format_line(command, *params):
    """Build an outbound IRC line.

    Examples
    --------
    >>> format_line('PONG', ':tmi.twitch.tv')
    'PONG ::tmi.twitch.tv'
    >>> format_line('JOIN', '#shroud')
    'JOIN #shroud'
    >>> format_line('CAP', 'REQ', 'twitch.tv/tags twitch.tv/commands')
    'CAP REQ :twitch.tv/tags twitch.tv/commands'
    """
    params = list(params)
    if params:
        last = params[-1]
        if not last or ' ' in last or last.startswith(':'):
            params[-1] = ':' + last
    return ' '.join([command] + params)
