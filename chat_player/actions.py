"""Extraction of chat messages from the actions of a live chat response."""

from collections import namedtuple
from enum import Enum

from .utils.core import (
    multi_get,
    int_or_none,
    try_get_first_key
)
from .debugging import log


class ActionKind(Enum):
    UNRECOGNIZED = 0
    CHAT = 1
    SUPERCHAT = 2


# renderer is None for UNRECOGNIZED actions.
# video_offset_ms is None for live actions.
ChatAction = namedtuple('ChatAction', ['kind', 'renderer', 'video_offset_ms'])

_RENDERER_KINDS = {
    'liveChatTextMessageRenderer': ActionKind.CHAT,
    'liveChatPaidMessageRenderer': ActionKind.SUPERCHAT,
}


def classify_item(item):
    """Determine which kind of chat message an item holds. Never raises,
    whatever the shape of the item.

    :param item: The `item` of an `addChatItemAction`
    :type item: object
    :return: The kind of the item and its renderer payload (None if
        the item is not recognised)
    :rtype: tuple(ActionKind, dict)
    """
    if not isinstance(item, dict):
        return ActionKind.UNRECOGNIZED, None

    for renderer_key, kind in _RENDERER_KINDS.items():
        renderer = item.get(renderer_key)
        if isinstance(renderer, dict):
            return kind, renderer

    return ActionKind.UNRECOGNIZED, None


def unwrap_action(action):
    """Remove the replay envelope of an action, if it has one.

    :param action: The raw action
    :type action: dict
    :return: The inner action and the video offset (in milliseconds) of the
        replay envelope, or the action itself and None if it is not wrapped
    :rtype: tuple(dict, int)
    """
    replay_chat_item_action = multi_get(action, 'replayChatItemAction')
    if not isinstance(replay_chat_item_action, dict):
        return action, None

    offset = int_or_none(replay_chat_item_action.get('videoOffsetTimeMsec'))
    return multi_get(replay_chat_item_action, 'actions', 0), offset


def classify_action(action):
    """Classify one raw action of a live chat response.

    :param action: The raw action
    :type action: dict
    :return: The classified action
    :rtype: ChatAction
    """
    inner_action, offset = unwrap_action(action)
    item = multi_get(inner_action, 'addChatItemAction', 'item')
    kind, renderer = classify_item(item)
    return ChatAction(kind, renderer, offset)


def extract_chat_actions(actions, is_replay=False, start_time_ms=0):
    """Yield the chat messages of a live chat response, in order.

    Replay messages are re-based so that their timestamp is the moment they
    should be shown, relative to when playback started:
    `(video offset + start time) * 1000` microseconds.

    :param actions: The `actions` list of a `liveChatContinuation`
    :type actions: list
    :param is_replay: Whether the actions come from a chat replay,
        defaults to False
    :type is_replay: bool, optional
    :param start_time_ms: UNIX time (in milliseconds) at which playback
        started, defaults to 0
    :type start_time_ms: int, optional
    :return: Recognised chat messages
    :rtype: generator of ChatAction
    """
    for action in actions or []:
        chat_action = classify_action(action)

        if chat_action.kind == ActionKind.UNRECOGNIZED:
            inner_action = unwrap_action(action)[0]
            log('debug', f'Skipping action: {try_get_first_key(inner_action)}')
            continue

        if is_replay and chat_action.video_offset_ms is not None:
            timestamp_usec = int(
                (chat_action.video_offset_ms + start_time_ms) * 1000)
            chat_action = chat_action._replace(
                renderer=dict(chat_action.renderer, timestampUsec=timestamp_usec))

        yield chat_action
