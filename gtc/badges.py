#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Badge styles for chat participants.

Icons are Nerd Font glyphs; a terminal font without them shows
replacement boxes instead.
"""
from collections import namedtuple
from types import MappingProxyType


DEFAULT_FOREGROUND = '#FFFFFF'


class BadgeStyle(namedtuple('BadgeStyle',
                            'name color foreground_color icon')):
    """Badge style.

    Attributes
    ----------
    name : `str`
        Badge name as sent by the server (without version).
    color : `str`
        Background colour, hex.
    foreground_color : `str`
        Foreground colour, hex. Empty means white.
    icon : `str`
        Glyph shown for the badge.
    """
    __slots__ = ()

    def __new__(cls, name, color, foreground_color='', icon=''):
        return super().__new__(cls, name, color, foreground_color, icon)

    @property
    def foreground(self):
        return self.foreground_color or DEFAULT_FOREGROUND


def _table(*styles):
    return MappingProxyType({style.name: style for style in styles})


BADGE_STYLES = _table(
    BadgeStyle('premium', '#ADD8E6', '#FFA500', '\uedeb '),
    BadgeStyle('subscriber', '#32CD32', '#FFF', '\uf005 '),
    BadgeStyle('sub-gift-leader', '#FF69B4', '#FFF', '\uedeb '),
    BadgeStyle('moderator', '#0000FF', icon='\U000f04e5 '),
    BadgeStyle('hype-train', '#FFA500', icon='\ue3c3 '),
    BadgeStyle('subtember-2024', '#800080', '#F7820F', '\U000f0bbf '),
    BadgeStyle('partner', '#D776FF', icon='\uebe9 '),
    BadgeStyle('twitch-recap-2023', '#9146FF', icon='\uf004 '),
    BadgeStyle('glitchcon2020', '#F0ABFC', icon='\U0001f996'),
    BadgeStyle('vip', '#DB2777', icon='\U000f0b8a '),
    BadgeStyle('broadcaster', '#DC2626', icon='\uf03d '),
    BadgeStyle('cheer', '#ffd700', icon='\ue28e '),
)


def base_badge_name(key):
    """Strip a '/'-delimited version suffix.

    Examples
    --------
    >>> base_badge_name('sub-gift-leader/3')
    'sub-gift-leader'
    >>> base_badge_name('vip')
    'vip'
    """
    return key.split('/', 1)[0]


def lookup_badge(key, styles=BADGE_STYLES):
    """Look up a badge style by name prefix.

    Returns
    -------
    `BadgeStyle` or `None`
        `None` if the badge is unknown.
    """
    return styles.get(base_badge_name(key))
