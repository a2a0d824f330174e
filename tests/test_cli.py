import os
import sys
import argparse
import unittest
from unittest import mock

# Allow direct execution
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))  # noqa


from chat_player.cli import (
    main,
    str2bool,
    create_parser
)
from chat_player.chat_player import (
    ChatPlayer,
    format_record,
    run
)
from chat_player.models import (
    Author,
    Badge,
    ChatRecord,
    SuperChatRecord
)
from chat_player.errors import (
    VideoNotFound,
    ParsingError
)


class TestCLI(unittest.TestCase):
    """
    Class used to run unit tests for the command line.
    """

    def test_str2bool(self):
        for value in ('true', 'Yes', 'T', 'y', '1', 'enable', True):
            self.assertTrue(str2bool(value))
        for value in ('false', 'No', 'f', 'N', '0', 'disable', False):
            self.assertFalse(str2bool(value))

        with self.assertRaises(argparse.ArgumentTypeError):
            str2bool('maybe')

    def test_defaults(self):
        args = create_parser().parse_args(['jfKfPfyJRdk'])

        self.assertEqual(args.url, 'jfKfPfyJRdk')
        self.assertEqual(args.delay, 0)
        self.assertIsNone(args.timeout)
        self.assertEqual(args.max_attempts, 5)
        self.assertIsNone(args.retry_timeout)
        self.assertFalse(args.cancel_pending)
        self.assertEqual(args.logging, 'info')

    def test_arguments(self):
        args = create_parser().parse_args([
            'jfKfPfyJRdk', '-d', '5000', '--timeout', '60', '--max_attempts', '3',
            '--retry_timeout', '2.5', '--cancel_pending', '--proxy', ''
        ])

        self.assertEqual(args.delay, 5000)
        self.assertEqual(args.timeout, 60.0)
        self.assertEqual(args.max_attempts, 3)
        self.assertEqual(args.retry_timeout, 2.5)
        self.assertTrue(args.cancel_pending)
        self.assertEqual(args.proxy, '')

        args = create_parser().parse_args(['jfKfPfyJRdk', '--cancel_pending', 'false'])
        self.assertFalse(args.cancel_pending)

    def test_main(self):
        with mock.patch('chat_player.cli.run') as mock_run:
            main(['jfKfPfyJRdk', '--timeout', '10', '--logging', 'warning'])

        kwargs = mock_run.call_args[1]
        self.assertEqual(kwargs['url'], 'jfKfPfyJRdk')
        self.assertEqual(kwargs['timeout'], 10.0)
        self.assertIsNone(kwargs['cookies'])

    def test_run_reports_errors(self):
        with mock.patch.object(ChatPlayer, 'get_video', side_effect=VideoNotFound('Not found')), \
                mock.patch.object(ChatPlayer, 'close') as close, \
                mock.patch('chat_player.chat_player.log') as log:
            run(url='jfKfPfyJRdk')

        log.assert_any_call('error', mock.ANY)
        close.assert_called_once_with()

    def test_run_reports_parsing_errors(self):
        with mock.patch.object(ChatPlayer, 'get_video', side_effect=ParsingError('Unable to parse initial video data')), \
                mock.patch.object(ChatPlayer, 'close'), \
                mock.patch('chat_player.chat_player.log') as log:
            run(url='jfKfPfyJRdk')

        level, message = log.call_args[0]
        self.assertEqual(level, 'error')
        self.assertTrue(message.startswith('Unable to parse initial video data. '))
        self.assertNotIn('http', message)

    def test_run_splits_parameters(self):
        with mock.patch.object(ChatPlayer, 'play') as play, \
                mock.patch.object(ChatPlayer, '__init__', return_value=None) as init, \
                mock.patch.object(ChatPlayer, 'close'):
            run(url='jfKfPfyJRdk', delay=1000, proxy='', logging='info', quiet=True)

        init.assert_called_once_with(headers=None, cookies=None, proxy='')

        play_params = play.call_args[1]
        self.assertEqual(play_params['url'], 'jfKfPfyJRdk')
        self.assertEqual(play_params['delay'], 1000)
        self.assertIsNone(play_params['callback'])
        self.assertNotIn('logging', play_params)

    def test_format_record(self):
        author = Author('UC_author', 'alice')
        timestamp_usec = 1600000000 * 1000000

        record = ChatRecord('a1', author, 'hi', badges=[Badge('Moderator', icon='MODERATOR')],
                            timestamp_usec=timestamp_usec)
        self.assertTrue(format_record(record).endswith(' | (Moderator) alice: hi'))

        record = SuperChatRecord('a2', author, '$2.00', message='thanks',
                                 timestamp_usec=timestamp_usec)
        self.assertTrue(format_record(record).endswith(' | *$2.00* alice: thanks'))


if __name__ == '__main__':
    unittest.main()
