"""
Unit tests for gtc/auth.py

Tests the OAuth client-credentials exchange with a fake POST.
"""
import pytest
import requests
from unittest.mock import Mock

from gtc.auth import get_oauth_token, TOKEN_URL
from gtc.error import AuthError


def test_returns_token(mock_post):
    post = mock_post({'access_token': 'abc123', 'expires_in': 5000000,
                      'token_type': 'bearer'})
    assert get_oauth_token('id', 'secret', post=post) == 'abc123'


def test_form_body(mock_post):
    """Credentials are sent form-encoded to the token endpoint."""
    post = mock_post({'access_token': 'abc123'})
    get_oauth_token('id', 'secret', post=post, timeout=3)
    post.assert_called_once_with(TOKEN_URL, data={
        'client_id': 'id',
        'client_secret': 'secret',
        'grant_type': 'client_credentials'
    }, timeout=3)


@pytest.mark.parametrize('body', [
    {'status': 400, 'message': 'invalid client'},
    {'access_token': 12345},
    ['access_token'],
])
def test_unexpected_shape(mock_post, body):
    post = mock_post(body, text='{"status":400,"message":"invalid client"}')
    with pytest.raises(AuthError) as exc:
        get_oauth_token('id', 'bad', post=post)
    assert 'invalid client' in str(exc.value)


def test_non_json_body():
    response = Mock()
    response.text = '<html>oops</html>'
    response.json = Mock(side_effect=ValueError('no json'))
    with pytest.raises(AuthError) as exc:
        get_oauth_token('id', 'secret', post=Mock(return_value=response))
    assert '<html>oops</html>' in str(exc.value)


def test_transport_error():
    post = Mock(side_effect=requests.ConnectionError('unreachable'))
    with pytest.raises(AuthError):
        get_oauth_token('id', 'secret', post=post)
