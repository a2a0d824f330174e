import requests
from requests.exceptions import RequestException
from http.cookiejar import (MozillaCookieJar, Cookie)
from json.decoder import JSONDecodeError
import hashlib
import os
import random
import re
import time

from .context import ClientContext
from .video import LiveVideo
from .errors import (
    TransportError,
    CookieError,
    VideoNotFound,
    ParsingError,
    VideoUnavailable,
    LoginRequired,
    VideoUnplayable,
    ChatDisabled,
    NoChatReplay,
    NoContinuation,
    InvalidURL
)
from .utils.core import (
    multi_get,
    int_or_none,
    regex_search,
    try_parse_json,
    try_get_first_value,
    get_title_of_webpage
)
from .debugging import log


class YouTubeClient():
    """Session used to load videos and make requests to YouTube's private API."""

    _YT_INITIAL_BOUNDARY_RE = r'\s*(?:var\s+(?:meta|head)|</script|\n)'
    _YT_INITIAL_DATA_RE = r'(?:window\s*\[\s*["\']ytInitialData["\']\s*\]|ytInitialData)\s*=\s*({.+?})\s*;' + \
        _YT_INITIAL_BOUNDARY_RE
    _YT_INITIAL_PLAYER_RESPONSE_RE = r'ytInitialPlayerResponse\s*=\s*({.+?})\s*;' + \
        _YT_INITIAL_BOUNDARY_RE
    _YT_CFG_RE = r'ytcfg\.set\s*\(\s*({.+?})\s*\)\s*;'

    _YT_HOME = 'https://www.youtube.com'
    _YT_VIDEO_TEMPLATE = _YT_HOME + '/watch?v={}'

    _VIDEO_ID_RE = r'''(?x)^
        (?:
            (?:https?://|//)?
            (?:(?:www|m|music)\.)?
            (?:youtube(?:-nocookie)?\.com/(?:watch\?(?:.*?&)?v=|embed/|live/|shorts/|v/)|youtu\.be/)
        )?
        (?P<id>[0-9A-Za-z_-]{11})(?:[&?#/].*)?$'''

    _CONSENT_ID_REGEX = r'PENDING\+(\d+)'

    def __init__(self, headers=None, cookies=None, proxy=None):
        """Initialise a session with various parameters

        :param headers: Headers to use for subsequent requests, defaults to None
        :type headers: dict, optional
        :param cookies: Path of cookies file, defaults to None
        :type cookies: str, optional
        :param proxy: Use the specified HTTP/HTTPS/SOCKS proxy. Pass in an
            empty string for direct connection. Defaults to None
        :type proxy: str, optional
        :raises CookieError: if unable to read or parse the cookie file
        """
        self.session = requests.Session()

        if headers is None:
            headers = {
                'User-Agent': 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/86.0.4240.111 Safari/537.36',
                'Accept-Language': 'en-US, en, *'
            }
        self.session.headers = headers

        if proxy is not None:
            if proxy == '':
                proxies = {}
            else:
                proxies = {'http': proxy, 'https': proxy}

            self.session.proxies.update(proxies)

        cj = MozillaCookieJar(cookies)

        if cookies:
            # Only attempt to load if the cookie file exists.
            if os.path.exists(cookies):
                cj.load(ignore_discard=True, ignore_expires=True)
            else:
                raise CookieError(
                    'The file "{}" could not be found.'.format(cookies))
        self.session.cookies = cj

        self.innertube_context = {}
        self._initialize_consent()

    def update_session_headers(self, new_headers):
        self.session.headers.update(new_headers)

    def get_cookie_value(self, name, default=None):
        """Return the value for key if key is in the cookie dictionary, else default.

        :param name: The key of the cookie
        :type name: str
        :param default: Return this value if the specified cookie cannot be found, defaults to None
        :type default: object, optional
        :return: The cookie value, or default
        :rtype: Union[str, object, None]
        """
        return requests.utils.dict_from_cookiejar(self.session.cookies).get(name, default)

    def set_cookie_value(self, domain, name, value, expire_time=None, port=None,
                         path='/', secure=False, discard=False, rest=None):
        cookie = Cookie(
            0, name, value, port, port is not None, domain, True,
            domain.startswith('.'), path, True, secure, expire_time,
            discard, None, None, rest or {})
        self.session.cookies.set_cookie(cookie)

    def close(self):
        """Close the session. Once this has been called, no more requests can be made."""
        self.session.close()
        log('debug', 'Session closed.')

    def _initialize_consent(self):
        if self.get_cookie_value('__Secure-3PSID'):
            return

        consent_id = None
        consent = self.get_cookie_value('CONSENT')

        if consent:
            if 'YES' in consent:
                return

            consent_id = regex_search(consent, self._CONSENT_ID_REGEX)

        if not consent_id:
            consent_id = random.randint(100, 999)

        self.set_cookie_value('.youtube.com', 'CONSENT',
                              f'YES+cb.20210328-17-p0.en+FX+{consent_id}')

    def _generate_sapisidhash_header(self):
        sapis_id = self.get_cookie_value('SAPISID')
        sapisid_cookie = self.get_cookie_value('__Secure-3PAPISID') or sapis_id

        if sapisid_cookie is None:
            return

        time_now = round(time.time())

        # SAPISID cookie is required if not already present
        if not sapis_id:
            self.set_cookie_value(
                '.youtube.com', 'SAPISID', sapisid_cookie, secure=True, expire_time=time_now + 3600)

        # SAPISIDHASH algorithm from https://stackoverflow.com/a/32065323
        sapisidhash = hashlib.sha1(
            f'{time_now} {sapisid_cookie} {self._YT_HOME}'.encode('utf-8')).hexdigest()
        return f'SAPISIDHASH {time_now}_{sapisidhash}'

    def _generate_headers(self, ytcfg):
        headers = {
            'origin': self._YT_HOME,
            'x-youtube-client-name': str(ytcfg.get('INNERTUBE_CONTEXT_CLIENT_NAME')),
            'x-youtube-client-version': str(ytcfg.get('INNERTUBE_CLIENT_VERSION')),
            'x-origin': self._YT_HOME,
            'x-goog-authuser': '0',
            'content-type': 'application/json'
        }

        identity_token = ytcfg.get('ID_TOKEN')
        if identity_token:
            headers['x-youtube-identity-token'] = identity_token

        visitor_data = multi_get(
            ytcfg, 'INNERTUBE_CONTEXT', 'client', 'visitorData')
        if visitor_data:
            headers['x-goog-visitor-id'] = visitor_data

        return headers

    def post(self, url, data):
        """Make a single POST request to the private API

        :param url: The endpoint URL
        :type url: str
        :param data: The body of the request. The innertube context of the
            session is added to it.
        :type data: dict
        :raises TransportError: if the request fails, the response is not
            JSON, or the response is a server error
        :return: The decoded JSON response
        :rtype: dict
        """
        body = {'context': self.innertube_context, **data}

        # Update authentication header, if necessary
        auth = self._generate_sapisidhash_header()
        if auth:
            self.update_session_headers({'authorization': auth})

        try:
            response = self.session.post(url, json=body)
            json_response = response.json()
        except JSONDecodeError as e:
            page_title = get_title_of_webpage(response.text)
            raise TransportError(
                f'Unable to parse JSON ({page_title or response.status_code}): {e}') from e
        except RequestException as e:
            raise TransportError(str(e)) from e

        error = json_response.get('error') if isinstance(json_response, dict) else None
        if error:
            error_code = int_or_none(error.get('code'), 0)
            if error_code // 100 == 5:  # Server error, retry
                raise TransportError(f"Server error ({error_code}): {error.get('message')}")
            log('debug', f'Error in response: {error}')

        return json_response

    def _get_initial_info(self, url):
        try:
            response = self.session.get(url)
        except RequestException as e:
            raise TransportError(str(e)) from e

        html = response.text
        if response.status_code != 200:
            title = get_title_of_webpage(html)
            if response.status_code == 404:
                raise VideoNotFound(title)
            raise TransportError(f'Unable to load page ({response.status_code}): {title}')

        yt_initial_data = try_parse_json(regex_search(html, self._YT_INITIAL_DATA_RE))
        if not yt_initial_data:
            log('debug', html)
            raise ParsingError('Unable to parse initial video data')

        ytcfg = try_parse_json(regex_search(html, self._YT_CFG_RE), {})
        player_response = try_parse_json(
            regex_search(html, self._YT_INITIAL_PLAYER_RESPONSE_RE), {})

        return yt_initial_data, ytcfg, player_response

    @classmethod
    def get_video_id(cls, url):
        """Get the video id of a YouTube URL

        :param url: A video URL or an 11-character video id
        :type url: str
        :raises InvalidURL: if no video id can be found
        :return: The video id
        :rtype: str
        """
        match = re.match(cls._VIDEO_ID_RE, url.strip())
        if not match:
            raise InvalidURL(f'Invalid URL: "{url}"')
        return match.group('id')

    @staticmethod
    def _parse_text(info):
        if not isinstance(info, dict):
            return ''
        return info.get('simpleText') or ''.join(
            run.get('text') or '' for run in info.get('runs') or [])

    def _raise_unavailable(self, yt_initial_data, player_response):
        playability_status = player_response.get('playabilityStatus') or {}
        error_screen = playability_status.get('errorScreen')
        if error_screen:
            error_info = try_get_first_value(error_screen) or {}
            error_message = ' '.join(filter(None, (
                self._parse_text(error_info.get(key)) or playability_status.get(key)
                for key in ('reason', 'subreason')
            )))

            status = playability_status.get('status')
            if status == 'LOGIN_REQUIRED':
                raise LoginRequired(error_message)
            elif status == 'UNPLAYABLE':
                raise VideoUnplayable(error_message)
            elif status == 'LIVE_STREAM_OFFLINE':
                raise ChatDisabled(error_message)
            elif status != 'ERROR':
                log('debug', f'Unknown playability status: {status}. {playability_status}')
                error_message = f'{status}: {error_message}'
            raise VideoUnavailable(error_message)

        if not yt_initial_data.get('contents'):
            log('debug', f'Initial YouTube data: {yt_initial_data}')
            raise VideoUnavailable('Unable to find initial video contents.')

        # Video exists, but you cannot view chat for some reason
        error_message = self._parse_text(multi_get(
            yt_initial_data, 'contents', 'twoColumnWatchNextResults', 'conversationBar',
            'conversationBarRenderer', 'availabilityMessage', 'messageRenderer', 'text'
        )) or 'Video does not have a live chat or chat replay.'

        if 'disabled' in error_message:
            raise ChatDisabled(error_message)
        raise NoChatReplay(error_message)

    def create_context(self, ytcfg=None):
        """Create the context given to the chat poller and parser of a video

        :param ytcfg: Configuration found on a video page, defaults to None
        :type ytcfg: dict, optional
        :return: The context
        :rtype: ClientContext
        """
        ytcfg = ytcfg or {}
        if ytcfg:
            self.update_session_headers(self._generate_headers(ytcfg))
            self.innertube_context = ytcfg.get('INNERTUBE_CONTEXT') or {}

        return ClientContext(self.post, self._YT_HOME, ytcfg.get('INNERTUBE_API_KEY'))

    def get_video(self, video_id, **poller_params):
        """Load a livestream or a video with a chat replay

        :param video_id: The video id (or URL)
        :type video_id: str
        :raises VideoNotFound: if the video does not exist
        :raises NoContinuation: if the chat continuation cannot be found
        :return: The video
        :rtype: LiveVideo
        """
        video_id = self.get_video_id(video_id)
        yt_initial_data, ytcfg, player_response = self._get_initial_info(
            self._YT_VIDEO_TEMPLATE.format(video_id))

        live_chat = multi_get(yt_initial_data, 'contents', 'twoColumnWatchNextResults',
                              'conversationBar', 'liveChatRenderer')
        if not live_chat:
            self._raise_unavailable(yt_initial_data, player_response)

        continuation = multi_get(
            live_chat, 'continuations', 0, 'reloadContinuationData', 'continuation')
        if not continuation:
            raise NoContinuation(
                f'Initial continuation information could not be found: {live_chat}')

        video_details = player_response.get('videoDetails') or {}
        if 'isReplay' in live_chat:
            is_replay = bool(live_chat['isReplay'])
        else:
            is_replay = not video_details.get('isLive')

        watching_count = int_or_none(re.sub(r'[^\d]', '', self._parse_text(multi_get(
            yt_initial_data, 'contents', 'twoColumnWatchNextResults', 'results', 'results',
            'contents', 0, 'videoPrimaryInfoRenderer', 'viewCount', 'videoViewCountRenderer', 'viewCount'
        ))))

        log('debug', f'Loaded video {video_id} (replay: {is_replay}).')

        return LiveVideo(
            self.create_context(ytcfg),
            video_id,
            continuation,
            is_replay,
            title=video_details.get('title'),
            watching_count=watching_count,
            **poller_params
        )
