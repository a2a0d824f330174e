"""Parsing of chat message renderers into chat records."""

from .remapping import Remapper as r
from .models import (
    Image,
    Author,
    Badge,
    Emote,
    SpanKind,
    MessageSpan,
    ChatRecord,
    SuperChatColours,
    SuperChatRecord
)
from .actions import ActionKind
from .errors import ParsingError
from .utils.core import (
    multi_get,
    int_or_none
)


class ChatRecordParser():
    """Creates chat records from the renderer payloads of chat actions.

    Images are resolved against the base URL of the given context.
    """

    _COLOUR_KEYS = {
        'headerBackgroundColor': 'header_background',
        'headerTextColor': 'header_text',
        'bodyBackgroundColor': 'body_background',
        'bodyTextColor': 'body_text',
    }

    def __init__(self, context):
        """Create a ChatRecordParser object

        :param context: The capabilities of the owning client
        :type context: ClientContext
        """
        self.context = context

        self._remapping = {
            'id': 'record_id',
            'authorExternalChannelId': 'author_id',
            'authorName': r('author_name', self._get_simple_text),
            'authorPhoto': r('author_thumbnails', self.parse_thumbnails),
            'authorBadges': r('badges', self.parse_badges),
            'message': r(None, self.parse_runs, True),
            'timestampUsec': r('timestamp_usec', int_or_none),
            'purchaseAmountText': r('purchase_amount', self._get_simple_text),
        }

    @staticmethod
    def _get_simple_text(item):
        if not isinstance(item, dict):
            return None
        return item.get('simpleText')

    def parse_thumbnails(self, item):
        thumbnail_list = multi_get(item, 'thumbnails')
        if not isinstance(thumbnail_list, list):
            return []

        thumbnails = []
        for thumbnail in thumbnail_list:
            url = multi_get(thumbnail, 'url')
            if isinstance(url, str) and url:
                thumbnails.append(Image(
                    self.context.resolve_url(url),
                    thumbnail.get('width'),
                    thumbnail.get('height')
                ))
        return thumbnails

    def parse_runs(self, run_info):
        """Reads and parses YouTube formatted messages (i.e. runs).

        Each emoji is rendered as its first shortcut (or its id, if it has no
        shortcuts), and its position in the final message is recorded.

        :param run_info: The `message` object of a renderer
        :type run_info: dict
        :raises ParsingError: if the message or one of its runs is malformed
        :return: Keyword arguments for a ChatRecord
        :rtype: dict
        """
        if not isinstance(run_info, dict) or not isinstance(run_info.get('runs'), list):
            raise ParsingError(f'Malformed message: {run_info}')

        message = ''
        message_spans = []
        emotes = []

        for run in run_info['runs']:
            if not isinstance(run, dict):
                raise ParsingError(f'Malformed run: {run}')

            if 'text' in run:
                text = str(run['text'])
                message_spans.append(MessageSpan(SpanKind.TEXT, text))
                message += text

            elif isinstance(run.get('emoji'), dict):
                emoji = run['emoji']
                emoji_id = emoji.get('emojiId')
                name = multi_get(emoji, 'shortcuts', 0) or emoji_id
                if not isinstance(name, str) or not name:
                    raise ParsingError(f'Emoji has no id: {emoji}')

                emote = Emote(
                    emoji_id,
                    name,
                    self.parse_thumbnails(emoji.get('image')),
                    len(message),
                    len(message) + len(name)
                )
                emotes.append(emote)
                message_spans.append(MessageSpan(SpanKind.EMOTE, emote))
                message += name

            else:
                raise ParsingError(f'Unknown run: {run}')

        return {
            'message': message,
            'message_spans': message_spans,
            'emotes': emotes
        }

    def parse_badges(self, badge_items):
        badges = []
        if not isinstance(badge_items, list):
            return badges

        for badge in badge_items:
            renderer = multi_get(badge, 'liveChatAuthorBadgeRenderer')
            if not isinstance(renderer, dict):
                continue

            name = renderer.get('tooltip')
            if not isinstance(name, str):
                name = ''
            custom_thumbnail = renderer.get('customThumbnail')

            if custom_thumbnail:
                badges.append(
                    Badge(name, thumbnails=self.parse_thumbnails(custom_thumbnail)))
            else:
                icon = multi_get(renderer, 'icon', 'iconType')
                badges.append(
                    Badge(name, icon=icon if isinstance(icon, str) else None))

        return badges

    def parse(self, action):
        """Create a chat record from a classified chat action

        :param action: The chat action
        :type action: ChatAction
        :raises ParsingError: if required fields are missing or malformed
        :return: The chat record
        :rtype: Union[ChatRecord, SuperChatRecord]
        """
        return self.parse_renderer(action.renderer, action.kind)

    def parse_renderer(self, renderer, kind):
        if kind not in (ActionKind.CHAT, ActionKind.SUPERCHAT):
            raise ParsingError(f'Unable to parse action of kind {kind}')
        if not isinstance(renderer, dict):
            raise ParsingError(f'Malformed renderer: {renderer}')

        info = r.remap_dict(renderer, self._remapping)

        if not isinstance(info.get('record_id'), str) or not info['record_id']:
            raise ParsingError(f'Chat message has no id: {renderer}')
        if not isinstance(info.get('author_id'), str) or not info['author_id']:
            raise ParsingError(
                f"Chat message {info['record_id']} has no author")
        if info.get('timestamp_usec') is None:
            raise ParsingError(
                f"Chat message {info['record_id']} has no timestamp")
        if kind == ActionKind.CHAT and 'message' not in info:
            raise ParsingError(
                f"Chat message {info['record_id']} has no message")

        author = Author(
            info.pop('author_id'),
            info.pop('author_name', None) or '',
            info.pop('author_thumbnails', None)
        )

        if kind == ActionKind.SUPERCHAT:
            colours = SuperChatColours(**{
                new_key: int_or_none(renderer.get(colour_key))
                for colour_key, new_key in self._COLOUR_KEYS.items()
            })
            return SuperChatRecord(author=author, colours=colours, **info)

        info.pop('purchase_amount', None)
        return ChatRecord(author=author, **info)
