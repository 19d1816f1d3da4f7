#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import logging


logger = logging.getLogger(__name__)

WHITE = (255, 255, 255)

# Columns kept free to the right of a wrapped message body
WRAP_MARGIN = 20


def hex_to_rgb(color):
    """Convert a hex colour to an (r, g, b) tuple.

    Parameters
    ----------
    color : `str` or `None`
        '#RGB' or '#RRGGBB', leading '#' optional.

    Returns
    -------
    `tuple` of `int`
        White for empty or invalid input.

    Examples
    --------
    >>> hex_to_rgb('#FF69B4')
    (255, 105, 180)
    >>> hex_to_rgb('#FFF')
    (255, 255, 255)
    >>> hex_to_rgb('nope')
    (255, 255, 255)
    """
    value = (color or '').strip().lstrip('#')
    if len(value) == 3:
        value = ''.join(ch * 2 for ch in value)
    if len(value) != 6:
        return WHITE
    try:
        return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)
    except ValueError:
        return WHITE


def format_message_body(message, width):
    """Word-wrap a message body to the terminal width.

    Parameters
    ----------
    message : `str`
    width : `None` or `int`
        Terminal width in columns. `None` - size unknown.

    Returns
    -------
    `str`
        Wrapped lines joined with '\\n ', or the unchanged message
        if the width is unknown or too small to wrap into.
    """
    if not width:
        return message
    max_width = width - WRAP_MARGIN
    if max_width <= 0:
        logger.debug('format_message_body: width %d too small', width)
        return message

    lines = []
    current = ''
    for word in message.split():
        if current and len(current) + len(word) + 1 > max_width:
            lines.append(current)
            current = ''
        current = '%s %s' % (current, word) if current else word
    if current:
        lines.append(current)
    return '\n '.join(lines)


def clear_screen(term, stream):
    """Clear the terminal and move the cursor home."""
    stream.write(term.home + term.clear)
    stream.flush()
