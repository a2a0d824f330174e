"""Typed records produced from raw chat actions."""

from collections import namedtuple
from enum import Enum

from .utils.core import (
    arbg_int_to_rgba,
    rgba_to_hex
)


class Image():
    def __init__(self, url, width=None, height=None, image_id=None):
        """Create an Image object

        :param url: The URL of the actual image
        :type url: str
        :param width: The width of the image, defaults to None
        :type width: int, optional
        :param height: The height of the image, defaults to None
        :type height: int, optional
        :param image_id: A identifier for the image, usually of the form: {width}x{height}, defaults to None
        :type image_id: str, optional
        """
        self.url = url

        if self.url.startswith('//'):
            self.url = 'https:' + self.url

        self.width = width
        self.height = height

        if width and height and not image_id:
            self.id = '{}x{}'.format(width, height)
        else:
            self.id = image_id

    def json(self):
        """Return the JSON representation of an Image

        :return: JSON representation of the object
        :rtype: dict
        """
        return {k: v for k, v in self.__dict__.items() if v is not None}


class Author():
    """The channel which sent a chat message."""

    def __init__(self, author_id, name='', thumbnails=None):
        self.id = author_id
        self.name = name
        self.thumbnails = thumbnails or []

    def json(self):
        return {
            'id': self.id,
            'name': self.name,
            'images': [thumbnail.json() for thumbnail in self.thumbnails]
        }


class Badge():
    """A badge shown next to an author's name. Custom badges (e.g. member
    badges) have thumbnails, while built-in badges (e.g. moderator) only
    have an icon name."""

    def __init__(self, name, thumbnails=None, icon=None):
        self.name = name
        self.thumbnails = thumbnails
        self.icon = icon

    def json(self):
        info = {'title': self.name}
        if self.thumbnails is not None:
            info['icons'] = [thumbnail.json() for thumbnail in self.thumbnails]
        if self.icon is not None:
            info['icon_name'] = self.icon.lower()
        return info


class Emote():
    def __init__(self, emote_id, name, thumbnails=None, start_index=0, end_index=0):
        """Create an Emote object

        :param emote_id: The emoji identifier
        :type emote_id: str
        :param name: The text the emote is rendered as in the message
        :type name: str
        :param thumbnails: Images of the emote, defaults to None
        :type thumbnails: list[Image], optional
        :param start_index: Index of the first character of the emote in the
            message, defaults to 0
        :type start_index: int, optional
        :param end_index: Index one past the last character of the emote in
            the message, defaults to 0
        :type end_index: int, optional
        """
        self.id = emote_id
        self.name = name
        self.thumbnails = thumbnails or []
        self.start_index = start_index
        self.end_index = end_index

    def json(self):
        return {
            'id': self.id,
            'name': self.name,
            'images': [thumbnail.json() for thumbnail in self.thumbnails],
            'locations': [[self.start_index, self.end_index]]
        }


class SpanKind(Enum):
    TEXT = 'text'
    EMOTE = 'emote'


# payload is a str for TEXT spans and an Emote for EMOTE spans
MessageSpan = namedtuple('MessageSpan', ['kind', 'payload'])


class ChatRecord():
    """A normal chat message."""

    message_type = 'text_message'

    def __init__(self, record_id, author, message='', message_spans=None,
                 emotes=None, badges=None, timestamp_usec=None):
        """Create a ChatRecord object

        :param record_id: Unique identifier of the message
        :type record_id: str
        :param author: The author of the message
        :type author: Author
        :param message: The rendered text of the message, defaults to ''
        :type message: str, optional
        :param message_spans: The message split into text and emote spans,
            defaults to None
        :type message_spans: list[MessageSpan], optional
        :param emotes: Emotes used in the message, defaults to None
        :type emotes: list[Emote], optional
        :param badges: Badges of the author, defaults to None
        :type badges: list[Badge], optional
        :param timestamp_usec: UNIX time the message was sent, in
            microseconds, defaults to None
        :type timestamp_usec: int, optional
        """
        self.id = record_id
        self.author = author
        self.message = message
        self.message_spans = message_spans or []
        self.emotes = emotes or []
        self.badges = badges or []
        self.timestamp_usec = timestamp_usec

    @property
    def timestamp_ms(self):
        return self.timestamp_usec / 1000

    def json(self):
        """Return the JSON representation of the record

        :return: JSON representation of the object
        :rtype: dict
        """
        info = {
            'message_id': self.id,
            'message_type': self.message_type,
            'message': self.message,
            'timestamp': self.timestamp_usec,
            'author': self.author.json()
        }
        if self.badges:
            info['author']['badges'] = [badge.json() for badge in self.badges]
        if self.emotes:
            info['emotes'] = [emote.json() for emote in self.emotes]
        return info

    def __repr__(self):
        return '<{} {} {!r}: {!r}>'.format(
            self.__class__.__name__, self.id, self.author.name, self.message)


class SuperChatColours():
    """Colours of a super chat box, as raw ARGB integers."""

    def __init__(self, header_background=None, header_text=None,
                 body_background=None, body_text=None):
        self.header_background = header_background
        self.header_text = header_text
        self.body_background = body_background
        self.body_text = body_text

    def json(self):
        return {
            '{}_colour'.format(key): rgba_to_hex(arbg_int_to_rgba(value))
            for key, value in self.__dict__.items()
            if isinstance(value, int)
        }


class SuperChatRecord(ChatRecord):
    """A paid message, highlighted in chat."""

    message_type = 'paid_message'

    def __init__(self, record_id, author, purchase_amount=None, colours=None, **kwargs):
        """Create a SuperChatRecord object

        :param purchase_amount: Purchase amount including the currency
            (e.g. NZ$2.00), defaults to None
        :type purchase_amount: str, optional
        :param colours: Colours of the super chat box, defaults to None
        :type colours: SuperChatColours, optional
        """
        super().__init__(record_id, author, **kwargs)
        self.purchase_amount = purchase_amount
        self.colours = colours or SuperChatColours()

    def json(self):
        info = super().json()
        info['money'] = self.purchase_amount
        info.update(self.colours.json())
        return info
