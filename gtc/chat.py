#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Chat message rendering.

Turns inbound chat messages into styled terminal lines:

    [12:34:56] <badges> Bob: hello there

Timestamp, badge icons on their badge colours, the sender name in bold
in the sender's colour, and the padded message body. First-time
chatters get an emphasised body.
"""
import sys
import json
import logging
from datetime import datetime

from blessed import Terminal

from .badges import BADGE_STYLES, lookup_badge
from .util import hex_to_rgb, format_message_body


DEFAULT_USER_COLOR = '#FFFFFF'
FIRST_MESSAGE_COLOR = '#D946EF'
TIMESTAMP_FORMAT = '%H:%M:%S'
LOG_FILE = 'chat.log.jsonl'


class Chat:
    """Chat message renderer.

    Attributes
    ----------
    show_timestamp : `bool`
        Prefix lines with the local time.
    log_messages : `bool`
        Append every message to `log_file`.
    badge_styles : `collections.abc.Mapping` of (`str`, `gtc.badges.BadgeStyle`)
        Read-only badge table.
    term : `blessed.Terminal`
    stream : file-like
        Where rendered lines are written.
    log_file : `str`
        Message log path (newline-delimited JSON).
    wrap_messages : `bool`
        Word-wrap message bodies to the terminal width.
    """
    logger = logging.getLogger(__name__)

    def __init__(self, show_timestamp=False, log_messages=False,
                 badge_styles=BADGE_STYLES, term=None, stream=None,
                 log_file=LOG_FILE, wrap_messages=False):
        self._show_timestamp = show_timestamp
        self._log_messages = log_messages
        self._wrap_messages = wrap_messages
        self.badge_styles = badge_styles
        self.term = term if term is not None else Terminal()
        self.stream = stream if stream is not None else sys.stdout
        self.log_file = log_file

    @property
    def show_timestamp(self):
        return self._show_timestamp

    @property
    def log_messages(self):
        return self._log_messages

    @property
    def wrap_messages(self):
        return self._wrap_messages

    def _style(self, foreground=None, background=None, bold=False):
        term = self.term
        style = ''
        if bold:
            style += term.bold
        if background is not None:
            style += term.on_color_rgb(*hex_to_rgb(background))
        if foreground is not None:
            style += term.color_rgb(*hex_to_rgb(foreground))
        return style

    def _render(self, text, style):
        if not style:
            return text
        return '%s%s%s' % (style, text, self.term.normal)

    def format_badges(self, message):
        """Render the badge prefix of a message.

        Badges with level <= 0 and badges without a style are skipped.
        """
        res = ''
        for key, level in message.badges.items():
            if level <= 0:
                continue
            badge = lookup_badge(key, self.badge_styles)
            if badge is None:
                self.logger.debug('format_badges: no style for %s', key)
                continue
            text = badge.icon
            if level > 1:
                text += str(level)
            style = self._style(foreground=badge.foreground,
                                background=badge.color)
            res += self._render(text, style) + ' '
        return res

    def format_timestamp(self, now=None):
        """Render the '[HH:MM:SS] ' prefix, or '' if timestamps are off."""
        if not self.show_timestamp:
            return ''
        now = now or datetime.now()
        return '[%s] ' % now.strftime(TIMESTAMP_FORMAT)

    def format_user(self, message):
        color = message.color or DEFAULT_USER_COLOR
        return self._render(message.display_name,
                            self._style(foreground=color, bold=True))

    def format_body(self, message):
        body = message.message
        if self.wrap_messages:
            width = self.term.width if self.term.is_a_tty else None
            body = format_message_body(body, width)
        body = ' %s ' % body
        if message.first_message:
            return self._render(
                body, self._style(foreground=FIRST_MESSAGE_COLOR, bold=True)
            )
        return body

    def format_message(self, message, now=None):
        """Render a chat message as a single styled line.

        Parameters
        ----------
        message : `gtc.message.ChatMessage`
        now : `None` or `datetime.datetime`, optional
            Time for the timestamp prefix (default: local time).

        Returns
        -------
        `str`
        """
        return ' %s%s%s:%s' % (
            self.format_timestamp(now),
            self.format_badges(message),
            self.format_user(message),
            self.format_body(message)
        )

    def show_message(self, message):
        """Write a chat message to the output stream.

        Parameters
        ----------
        message : `gtc.message.ChatMessage`
        """
        if self.log_messages:
            self.write_message_to_file(message)
        self.stream.write(self.format_message(message) + '\n\n')
        self.stream.flush()

    def handle_message(self, _, message):
        """`chat_message` event handler."""
        self.show_message(message)

    def write_message_to_file(self, message):
        """Append a message to the log file as one JSON line.

        Errors are logged and never propagate.
        """
        try:
            line = json.dumps(message.to_dict(), ensure_ascii=False)
        except (TypeError, ValueError) as ex:
            self.logger.error('Error marshalling message: %r', ex)
            return
        try:
            with open(self.log_file, 'a', encoding='utf-8') as fp:
                fp.write(line + '\n')
        except OSError as ex:
            self.logger.error('Error writing to %s: %s', self.log_file, ex)
