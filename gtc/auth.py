#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import logging

import requests

from .error import AuthError


logger = logging.getLogger(__name__)

TOKEN_URL = 'https://id.twitch.tv/oauth2/token'


def get_oauth_token(client_id, client_secret, post=requests.post, timeout=10):
    """Get an app access token (OAuth client credentials grant).

    Parameters
    ----------
    client_id : `str`
    client_secret : `str`
    post : `function` (url, data, timeout), optional
        HTTP POST function.
    timeout : `float`, optional
        Request timeout in seconds.

    Returns
    -------
    `str`
        Access token.

    Raises
    ------
    `gtc.error.AuthError`
    """
    data = {
        'client_id': client_id,
        'client_secret': client_secret,
        'grant_type': 'client_credentials'
    }
    logger.info('get_oauth_token %s', TOKEN_URL)
    try:
        res = post(TOKEN_URL, data=data, timeout=timeout)
    except requests.RequestException as ex:
        raise AuthError('token request failed: %r' % ex)

    body = res.text
    try:
        result = res.json()
    except ValueError:
        raise AuthError('failed to get access token: %s' % body)

    token = result.get('access_token') if isinstance(result, dict) else None
    if not isinstance(token, str):
        raise AuthError('failed to get access token: %s' % body)
    return token
