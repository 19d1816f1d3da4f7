from .chat import Chat
from .client import ChatClient
from .message import ChatMessage
from .irc_socket import IRCSocket
from .badges import BadgeStyle, BADGE_STYLES
from .auth import get_oauth_token

__version__ = '0.1.0'
