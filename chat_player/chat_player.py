"""Main module."""
import sys

from requests.exceptions import (
    RequestException,
    ConnectionError
)

from .metadata import __version__
from .client import YouTubeClient
from .models import SuperChatRecord
from .utils.core import (
    safe_print,
    get_default_args,
    update_dict_without_overwrite,
    microseconds_to_timestamp
)
from .debugging import (
    log,
    set_testing_mode,
    TestingModes,
    TestingException
)
from .errors import (
    URLNotProvided,
    ChatPlayerError,
    ParsingError
)


class ChatPlayer():
    """Class used to create sessions and play chats."""

    def __init__(self,
                 headers=None,
                 cookies=None,
                 proxy=None,
                 ):
        """Initialise a new session for making requests. Parameters are saved
        and are sent to the client when it is created.

        :param headers: Headers to use for subsequent requests, defaults to None
        :type headers: dict, optional
        :param cookies: Path of cookies file, defaults to None
        :type cookies: str, optional
        :param proxy: Use the specified HTTP/HTTPS/SOCKS proxy. To enable SOCKS
            proxy, specify a proper scheme. For example socks5://127.0.0.1:1080/.
            Pass in an empty string (--proxy "") for direct connection. Defaults
            to None
        :type proxy: str, optional
        """

        self.init_params = locals()
        self.init_params.pop('self')

        log('debug', f'Python version: {sys.version}')
        log('debug', f'Program version: {__version__}')
        log('debug', f'Initialisation parameters: {self.init_params}')

        self.client = None

    def create_client(self):
        if self.client is None:
            self.client = YouTubeClient(**self.init_params)
            log('debug', 'Created YouTubeClient session.')
        return self.client

    def get_video(self, url=None,
                  max_attempts=5,
                  retry_timeout=None,
                  cancel_pending=False
                  ):
        """Used to load a livestream or a video with a chat replay.

        :param url: The URL (or id) of the livestream or video, defaults to None
        :type url: str, optional
        :param max_attempts: Maximum number of consecutive failed requests
            before chat playback is stopped, defaults to 5
        :type max_attempts: int, optional
        :param retry_timeout: Number of seconds to wait before retrying. Default
            is None (use exponential backoff, i.e. immediate, 1s, 2s, 4s, 8s, ...)
        :type retry_timeout: float, optional
        :param cancel_pending: Cancel messages which have been received but not
            yet shown when chat playback stops. Defaults to False
        :type cancel_pending: bool, optional
        :raises URLNotProvided: if no URL is provided
        :return: The video
        :rtype: LiveVideo
        """
        if not url:
            raise URLNotProvided('No URL provided.')

        video = self.create_client().get_video(
            url,
            max_attempts=max_attempts,
            retry_timeout=retry_timeout,
            cancel_pending_on_stop=cancel_pending
        )
        log('info', f'Playing chat for "{video.title}".')
        return video

    def play(self, url=None,
             delay=0,
             timeout=None,
             max_attempts=5,
             retry_timeout=None,
             cancel_pending=False,
             callback=None
             ):
        """Used to play the chat of a livestream or a past broadcast in real time.

        :param url: The URL (or id) of the livestream or video, defaults to None
        :type url: str, optional
        :param delay: Chat delay in milliseconds. A negative delay shows
            messages early. Defaults to 0
        :type delay: int, optional
        :param timeout: Stop playing chat after a certain duration
            (in seconds), defaults to None
        :type timeout: float, optional
        :param max_attempts: Maximum number of consecutive failed requests
            before chat playback is stopped, defaults to 5
        :type max_attempts: int, optional
        :param retry_timeout: Number of seconds to wait before retrying. Default
            is None (use exponential backoff, i.e. immediate, 1s, 2s, 4s, 8s, ...)
        :type retry_timeout: float, optional
        :param cancel_pending: Cancel messages which have been received but not
            yet shown when chat playback stops. Defaults to False
        :type cancel_pending: bool, optional
        :param callback: Function to call on every message, defaults to None
        :type callback: function, optional
        :return: The video, once playback has finished
        :rtype: LiveVideo
        """
        video = self.get_video(url, max_attempts, retry_timeout, cancel_pending)

        if callback is not None:
            video.on('chat', callback)

        video.play_chat(delay)
        video.run(timeout)
        return video

    def close(self):
        """Close the session associated with the object"""
        if self.client is not None:
            self.client.close()
            self.client = None


def format_record(record):
    """Format a chat record for printing

    :param record: The chat record
    :type record: ChatRecord
    :return: The formatted record
    :rtype: str
    """
    text = '{} | '.format(microseconds_to_timestamp(record.timestamp_usec, '%H:%M:%S'))
    if isinstance(record, SuperChatRecord) and record.purchase_amount:
        text += '*{}* '.format(record.purchase_amount)

    badges = ', '.join(badge.name for badge in record.badges if badge.name)
    if badges:
        text += '({}) '.format(badges)

    return text + '{}: {}'.format(record.author.name, record.message)


def run(propagate_interrupt=False, **kwargs):
    """
    Create a single session and play the chat using the specified parameters.
    """

    # Set testing mode
    if kwargs.get('exit_on_debug'):
        set_testing_mode(TestingModes.EXIT_ON_DEBUG)
    elif kwargs.get('pause_on_debug'):
        set_testing_mode(TestingModes.PAUSE_ON_DEBUG)

    init_param_names = get_default_args(ChatPlayer.__init__)
    program_param_names = get_default_args(ChatPlayer.play)

    update_dict_without_overwrite(kwargs, init_param_names)
    update_dict_without_overwrite(kwargs, program_param_names)

    play_params = {}
    init_params = {}

    for arg in kwargs:
        value = kwargs[arg]

        if arg in program_param_names:
            play_params[arg] = value
        elif arg in init_param_names:
            init_params[arg] = value

    if play_params.get('callback') is None and not kwargs.get('quiet'):
        def callback(record):
            safe_print(format_record(record), flush=True)
        play_params['callback'] = callback

    player = ChatPlayer(**init_params)

    try:
        video = player.play(**play_params)

        if video.poller.last_error is None:
            log('info', 'Finished playing chat messages.')

    except (
        ParsingError,
        TestingException
    ) as e:  # Errors which may be bugs
        log('error', f'{e}. This may be a bug, please report it along with the URL of the video.')

    except ChatPlayerError as e:  # Expected errors
        log('error', e)

    except ConnectionError as e:
        log(
            'error', f'Unable to establish a connection. Please check your internet connection. {e}')

    except RequestException as e:
        log('error', e)

    except KeyboardInterrupt as e:
        if propagate_interrupt:
            raise e
        else:
            log('error', 'Keyboard Interrupt')

    finally:
        player.close()
