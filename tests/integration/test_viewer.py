"""
End-to-end tests for the chat viewer.

Config store -> channel resolver -> renderer -> client, with the server
side replaced by a scripted socket.
"""
import io
import re
import json
import pytest
from unittest.mock import Mock

from bots.viewer import bot as viewer
from common.config import ConfigManager
from gtc.chat import LOG_FILE
from gtc.error import AuthError


pytestmark = pytest.mark.integration

NICK_JOIN = ':justinfan1!justinfan1@justinfan1.tmi.twitch.tv JOIN #shroud'
FIRST_MSG = (
    '@badges=moderator/1,mystery/1;color=;display-name=Newbie;first-msg=1;'
    'tmi-sent-ts=1699747200000 :newbie!newbie@newbie.tmi.twitch.tv '
    'PRIVMSG #shroud :first time here'
)


@pytest.fixture
def run_dir(tmp_path, monkeypatch):
    """Run the viewer from a scratch working directory."""
    workdir = tmp_path / 'work'
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    return workdir


def test_full_flow(viewer_config, scripted_socket, privmsg_line, run_dir,
                   capsys):
    """Messages are rendered and logged until the connection closes."""
    socket, connect = scripted_socket([
        NICK_JOIN,
        'PING :tmi.twitch.tv',
        privmsg_line,
        FIRST_MSG,
    ])

    code = viewer.main(['shroud'], socket_io=connect,
                       config_manager=viewer_config)

    out, err = capsys.readouterr()
    assert code == 1
    assert "Welcome to shroud's chat!" in out
    assert 'Press Ctrl+C to exit.' in out
    assert 'Bob: hello there \n\n' in out
    assert 'Newbie: first time here \n\n' in out
    assert re.search(r'\[\d\d:\d\d:\d\d\] ', out)
    assert 'Error connecting to Twitch chat' in err

    sent = [call.args[0] for call in socket.send.await_args_list]
    assert 'JOIN #shroud' in sent
    assert 'PONG tmi.twitch.tv' in sent

    lines = (run_dir / LOG_FILE).read_text(encoding='utf-8').splitlines()
    assert [json.loads(line)['user']['display_name'] for line in lines] == [
        'Bob', 'Newbie'
    ]
    assert json.loads(lines[1])['first_message'] is True


def test_channel_from_prompt(config_dir, scripted_socket, run_dir, capsys):
    """Without an argument the channel is asked for and saved."""
    socket, connect = scripted_socket([])
    manager = ConfigManager(config_dir)

    code = viewer.main([], socket_io=connect, config_manager=manager,
                       stdin=io.StringIO('Shroud\n'))

    assert code == 1
    assert ConfigManager(config_dir).load().twitch.channel == 'Shroud'
    sent = [call.args[0] for call in socket.send.await_args_list]
    assert 'JOIN #shroud' in sent
    assert not (run_dir / LOG_FILE).exists()


def test_empty_channel_is_fatal(config_dir, scripted_socket, capsys):
    socket, connect = scripted_socket([])
    code = viewer.main([], socket_io=connect,
                       config_manager=ConfigManager(config_dir),
                       stdin=io.StringIO('\n'))
    assert code == 1
    assert 'empty channel name' in capsys.readouterr().err
    socket.send.assert_not_awaited()


def test_config_error_is_fatal(config_dir, capsys):
    config_dir.mkdir(parents=True)
    (config_dir / 'config.yaml').write_text('port: [broken\n')
    code = viewer.main(['shroud'], config_manager=ConfigManager(config_dir))
    assert code == 1
    assert 'Failed to load configuration' in capsys.readouterr().err


def test_keyboard_interrupt_exits_cleanly(config_dir, run_dir, monkeypatch,
                                          capsys):
    monkeypatch.setattr(viewer, 'run_viewer',
                        Mock(side_effect=KeyboardInterrupt))
    code = viewer.main(['shroud'], config_manager=ConfigManager(config_dir))
    assert code == 0


class TestFetchAuthToken:
    """Test the optional token exchange at startup."""

    def test_no_credentials(self, config_manager):
        get_token = Mock()
        assert viewer.fetch_auth_token(config_manager.config, get_token) is None
        get_token.assert_not_called()

    def test_token_kept_in_memory(self, config_manager):
        config_manager.update('twitch.client_id', 'cid')
        config_manager.update('twitch.client_secret', 'secret')
        get_token = Mock(return_value='tok')

        config = config_manager.config
        assert viewer.fetch_auth_token(config, get_token) == 'tok'
        get_token.assert_called_once_with('cid', 'secret')
        assert config.twitch.auth_token == 'tok'
        assert 'tok' not in config_manager.config_path.read_text()

    def test_failure_is_not_fatal(self, config_manager, caplog):
        config_manager.update('twitch.client_id', 'cid')
        config_manager.update('twitch.client_secret', 'secret')
        get_token = Mock(side_effect=AuthError('invalid client'))
        assert viewer.fetch_auth_token(config_manager.config, get_token) is None
        assert 'could not get auth token' in caplog.text


def test_parse_args():
    assert viewer.parse_args(['shroud']).channel == 'shroud'
    assert viewer.parse_args([]).channel is None
