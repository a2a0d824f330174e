"""Set metadata for chat-player"""

__title__ = 'chat-player'
__program__ = 'chat_player'
__summary__ = 'Play back the live chat of YouTube livestreams and chat replays in real time. No authentication needed!'
__author__ = 'chat-player contributors'
__copyright__ = '2021 chat-player contributors'
__version__ = '0.1.0'
