"""Top-level package for chat-player."""

from .cli import main
from .chat_player import ChatPlayer
from .client import YouTubeClient
from .video import LiveVideo
