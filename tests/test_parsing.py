import os
import sys
import unittest

# Allow direct execution
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))  # noqa


from chat_player.context import ClientContext
from chat_player.actions import (
    ActionKind,
    ChatAction,
    classify_item,
    classify_action,
    extract_chat_actions
)
from chat_player.parsing import ChatRecordParser
from chat_player.models import (
    ChatRecord,
    SuperChatRecord,
    SpanKind
)
from chat_player.errors import ParsingError

from fakes import (
    text_action,
    text_renderer,
    paid_action
)


class TestChatRecordParser(unittest.TestCase):
    """
    Class used to run unit tests for the parsing of chat messages.
    """

    def setUp(self):
        self.parser = ChatRecordParser(ClientContext(None))

    def _parse_all(self, actions):
        return [self.parser.parse(action) for action in extract_chat_actions(actions)]

    def test_text_and_paid_messages(self):
        records = self._parse_all([
            text_action('a1', 'hi', 1600000000000000),
            paid_action('a2', 'thanks', '$2.00', timestamp_usec=1600000001000000),
        ])

        self.assertEqual(len(records), 2)

        chat, paid = records
        self.assertIs(type(chat), ChatRecord)
        self.assertEqual(chat.id, 'a1')
        self.assertEqual(chat.message, 'hi')
        self.assertEqual(chat.timestamp_usec, 1600000000000000)
        self.assertEqual(chat.author.name, 'alice')
        self.assertEqual(chat.author.id, 'UC_author')

        self.assertIsInstance(paid, SuperChatRecord)
        self.assertEqual(paid.message, 'thanks')
        self.assertEqual(paid.purchase_amount, '$2.00')
        self.assertEqual(paid.json()['message_type'], 'paid_message')
        self.assertEqual(paid.json()['header_background_colour'], '#d00000ff')

    def test_emoji_span(self):
        renderer = text_renderer('a1', timestamp_usec=1)
        renderer['message'] = {'runs': [
            {'emoji': {'emojiId': 'e1', 'shortcuts': ['smile']}}
        ]}
        record = self.parser.parse_renderer(renderer, ActionKind.CHAT)

        self.assertEqual(record.message, 'smile')
        self.assertEqual(len(record.emotes), 1)
        self.assertEqual(record.emotes[0].start_index, 0)
        self.assertEqual(record.emotes[0].end_index, 5)
        self.assertEqual(record.message_spans[0].kind, SpanKind.EMOTE)

    def test_message_spans_concatenate_to_message(self):
        renderer = text_renderer('a1', timestamp_usec=1)
        renderer['message'] = {'runs': [
            {'text': 'good '},
            {'emoji': {'emojiId': 'UCkszU2WH9gy1mb0dV-11UJg/abc', 'image': {
                'thumbnails': [{'url': '//yt3.ggpht.com/abc', 'width': 24, 'height': 24}]
            }}},
            {'text': ' morning'},
            {'emoji': {'emojiId': '\U0001f44b', 'shortcuts': [':wave:', ':hand:']}},
        ]}
        record = self.parser.parse_renderer(renderer, ActionKind.CHAT)

        rendered = ''.join(
            span.payload if span.kind == SpanKind.TEXT else span.payload.name
            for span in record.message_spans
        )
        self.assertEqual(rendered, record.message)
        self.assertEqual(record.message, 'good UCkszU2WH9gy1mb0dV-11UJg/abc morning:wave:')

        for emote in record.emotes:
            self.assertEqual(
                record.message[emote.start_index:emote.end_index], emote.name)

        self.assertEqual(record.emotes[0].thumbnails[0].url, 'https://yt3.ggpht.com/abc')

    def test_badges(self):
        renderer = text_renderer('a1', timestamp_usec=1)
        renderer['authorBadges'] = [
            {'liveChatAuthorBadgeRenderer': {
                'tooltip': 'Moderator',
                'icon': {'iconType': 'MODERATOR'}
            }},
            {'liveChatAuthorBadgeRenderer': {
                'tooltip': 'Member (2 months)',
                'customThumbnail': {'thumbnails': [{'url': 'https://yt3.ggpht.com/badge'}]}
            }},
        ]
        record = self.parser.parse_renderer(renderer, ActionKind.CHAT)

        moderator, member = record.badges
        self.assertEqual(moderator.name, 'Moderator')
        self.assertEqual(moderator.icon, 'MODERATOR')
        self.assertEqual(moderator.json()['icon_name'], 'moderator')
        self.assertEqual(member.thumbnails[0].url, 'https://yt3.ggpht.com/badge')

    def test_malformed_optional_fields(self):
        renderer = text_renderer('a1', timestamp_usec=1)
        renderer['authorPhoto'] = {'thumbnails': ['not-a-dict', {'url': None}, {'url': '//yt3.ggpht.com/photo'}]}
        renderer['authorBadges'] = 5
        record = self.parser.parse_renderer(renderer, ActionKind.CHAT)

        self.assertEqual([image.url for image in record.author.thumbnails],
                         ['https://yt3.ggpht.com/photo'])
        self.assertEqual(record.badges, [])

    def test_ids_must_be_strings(self):
        for record_id in (['x'], 5, {'id': 'a1'}):
            with self.assertRaises(ParsingError):
                self.parser.parse_renderer(text_renderer(record_id, timestamp_usec=1), ActionKind.CHAT)

    def test_missing_author_name(self):
        renderer = text_renderer('a1', timestamp_usec=1)
        del renderer['authorName']
        record = self.parser.parse_renderer(renderer, ActionKind.CHAT)
        self.assertEqual(record.author.name, '')

    def test_paid_message_without_text(self):
        renderer = text_renderer('a1', timestamp_usec=1, purchaseAmountText={'simpleText': '$5.00'})
        del renderer['message']
        record = self.parser.parse_renderer(renderer, ActionKind.SUPERCHAT)
        self.assertEqual(record.message, '')
        self.assertEqual(record.purchase_amount, '$5.00')

    def test_malformed_messages(self):
        malformed = []

        renderer = text_renderer('a1', timestamp_usec=1)
        renderer['message'] = {'runs': [{'unknown': True}]}
        malformed.append(renderer)

        renderer = text_renderer('a1', timestamp_usec=1)
        renderer['message'] = 'hi'
        malformed.append(renderer)

        renderer = text_renderer('a1', timestamp_usec=1)
        del renderer['message']
        malformed.append(renderer)

        renderer = text_renderer('a1')
        del renderer['timestampUsec']
        malformed.append(renderer)

        renderer = text_renderer('a1', timestamp_usec=1)
        del renderer['authorExternalChannelId']
        malformed.append(renderer)

        renderer = text_renderer(None, timestamp_usec=1)
        malformed.append(renderer)

        for renderer in malformed:
            with self.assertRaises(ParsingError):
                self.parser.parse_renderer(renderer, ActionKind.CHAT)

        with self.assertRaises(ParsingError):
            self.parser.parse(ChatAction(ActionKind.UNRECOGNIZED, None, None))


class TestActionClassification(unittest.TestCase):
    """
    Class used to run unit tests for the classification of chat actions.
    """

    def test_classify_item_is_total(self):
        items = [
            None, 1, 'text', [], {},
            {'liveChatTextMessageRenderer': None},
            {'liveChatTextMessageRenderer': 'invalid'},
            {'liveChatViewerEngagementMessageRenderer': {'id': 'x'}},
        ]
        for item in items:
            self.assertEqual(classify_item(item), (ActionKind.UNRECOGNIZED, None))

        renderer = {'id': 'a1'}
        self.assertEqual(classify_item({'liveChatTextMessageRenderer': renderer}),
                         (ActionKind.CHAT, renderer))
        self.assertEqual(classify_item({'liveChatPaidMessageRenderer': renderer}),
                         (ActionKind.SUPERCHAT, renderer))

    def test_unrecognised_actions_are_dropped(self):
        actions = [
            {'markChatItemAsDeletedAction': {'targetItemId': 'a0'}},
            {'addChatItemAction': {'item': {
                'liveChatMembershipItemRenderer': {'id': 'm1'}}}},
            {'addLiveChatTickerItemAction': {}},
            'invalid',
            text_action('a1', timestamp_usec=1),
        ]
        extracted = list(extract_chat_actions(actions))

        self.assertEqual(len(extracted), 1)
        self.assertEqual(extracted[0].kind, ActionKind.CHAT)
        self.assertEqual(extracted[0].renderer['id'], 'a1')

    def test_replay_timestamps(self):
        start_time_ms = 1600000000000
        action = {'replayChatItemAction': {
            'actions': [text_action('a1', timestamp_usec=1)],
            'videoOffsetTimeMsec': '5000'
        }}

        self.assertEqual(classify_action(action).video_offset_ms, 5000)

        chat_action, = extract_chat_actions([action], True, start_time_ms)
        self.assertEqual(chat_action.renderer['timestampUsec'],
                         (5000 + start_time_ms) * 1000)

        # the original renderer is left untouched
        self.assertEqual(action['replayChatItemAction']['actions'][0]
                         ['addChatItemAction']['item']['liveChatTextMessageRenderer']
                         ['timestampUsec'], '1')

    def test_live_timestamps_are_kept(self):
        chat_action, = extract_chat_actions(
            [text_action('a1', timestamp_usec=1234)], False, 1600000000000)
        self.assertEqual(chat_action.renderer['timestampUsec'], '1234')
        self.assertIsNone(chat_action.video_offset_ms)


if __name__ == '__main__':
    unittest.main()
