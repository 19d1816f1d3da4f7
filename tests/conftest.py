"""
Shared pytest fixtures for the gtc test suite.

This file contains fixtures that are available to all test files.
"""
import io
import pytest
from unittest.mock import Mock, AsyncMock

from blessed import Terminal

from gtc.irc import parse_line
from gtc.irc_socket import IRCSocket
from gtc.message import ChatMessage
from common.config import ConfigManager


PRIVMSG_LINE = (
    '@badge-info=subscriber/8;badges=subscriber/6,premium/1;'
    'color=#FF69B4;display-name=Bob;emotes=;first-msg=0;'
    'id=b34ccfc7-4977-403a-8a94-33c6bac34fb8;mod=0;room-id=1337;'
    'subscriber=1;tmi-sent-ts=1699747200000;turbo=0;user-id=42;'
    'user-type= :bob!bob@bob.tmi.twitch.tv PRIVMSG #shroud :hello there'
)


@pytest.fixture
def term():
    """
    Terminal with styling forced on, independent of the test runner's tty.

    Returns:
        Terminal: 256-colour xterm terminal
    """
    return Terminal(kind='xterm-256color', force_styling=True)


@pytest.fixture
def output():
    """
    In-memory output stream for rendered chat lines.

    Returns:
        io.StringIO
    """
    return io.StringIO()


@pytest.fixture
def privmsg_line():
    """
    Tagged PRIVMSG line as sent by Twitch.

    Returns:
        str: Raw IRC line
    """
    return PRIVMSG_LINE


@pytest.fixture
def chat_message():
    """
    Factory for chat messages.

    Returns:
        function: Keyword arguments override the defaults
    """
    def make(**kwargs):
        params = {
            'display_name': 'Bob',
            'message': 'hi',
            'color': '',
            'badges': {},
            'first_message': False,
            'channel': 'shroud',
            'login': 'bob',
        }
        params.update(kwargs)
        return ChatMessage(**params)
    return make


@pytest.fixture
def config_dir(tmp_path):
    """
    Temporary configuration directory.

    Returns:
        Path: Directory that does not exist yet
    """
    return tmp_path / 'config' / 'gtc'


@pytest.fixture
def config_manager(config_dir):
    """
    Configuration store backed by a temporary directory, loaded once.

    Returns:
        ConfigManager
    """
    manager = ConfigManager(config_dir)
    manager.load()
    return manager


@pytest.fixture
def scripted_socket():
    """
    Factory for a mocked IRCSocket that replays server lines.

    The socket raises ConnectionClosed once the script runs out.

    Returns:
        function: (lines) -> (socket, connect coroutine)
    """
    from gtc.error import ConnectionClosed

    def make(lines):
        socket = AsyncMock(spec=IRCSocket)
        socket.send = AsyncMock()
        socket.close = AsyncMock()
        script = [(parse_line(line), line) for line in lines]
        socket.recv = AsyncMock(
            side_effect=script + [ConnectionClosed('end of script')]
        )

        async def connect(url):
            return socket
        return socket, connect
    return make


@pytest.fixture
def mock_post():
    """
    Mock requests.post returning a JSON body.

    Returns:
        function: (json_body, text=None) -> Mock
    """
    def make(json_body, text=None):
        response = Mock()
        response.json = Mock(return_value=json_body)
        response.text = text if text is not None else str(json_body)
        return Mock(return_value=response)
    return make


# Pytest configuration helpers


def pytest_configure(config):
    """
    Pytest configuration hook.

    Registers custom markers.
    """
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "slow: Slow tests (>1s)")
