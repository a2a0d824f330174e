"""The capabilities of a client, passed explicitly to everything that needs them."""

from urllib import parse


class ClientContext():
    """Bundles the HTTP POST capability of a client with its base configuration.

    The chat poller and the chat record parser receive one of these instead
    of a reference to the client itself.
    """

    _YT_HOME = 'https://www.youtube.com'
    _LIVE_CHAT_API_TEMPLATE = '/youtubei/v1/live_chat/get_{}'

    def __init__(self, post, home=None, api_key=None):
        """Create a ClientContext object

        :param post: Function taking a URL and a JSON-serialisable body,
            returning the decoded JSON response. Should raise
            `TransportError` if the request fails.
        :type post: function
        :param home: Base URL of the site, defaults to https://www.youtube.com
        :type home: str, optional
        :param api_key: Innertube API key appended to endpoint URLs,
            defaults to None
        :type api_key: str, optional
        """
        self.post = post
        self.home = home or self._YT_HOME
        self.api_key = api_key

    def endpoint(self, is_replay):
        """Get the URL of the chat endpoint

        :param is_replay: Whether to get the replay endpoint
        :type is_replay: bool
        :return: The endpoint URL
        :rtype: str
        """
        api_type = 'live_chat_replay' if is_replay else 'live_chat'
        url = self.home + self._LIVE_CHAT_API_TEMPLATE.format(api_type)
        if self.api_key:
            url += '?' + parse.urlencode({'key': self.api_key})
        return url

    def resolve_url(self, url):
        if url.startswith('//'):
            return 'https:' + url
        elif url.startswith('/'):
            return self.home + url
        return url
