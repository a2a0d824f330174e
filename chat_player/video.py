from .events import EventChannel
from .poller import ContinuationPoller
from .scheduling import Timers
from .debugging import log


class LiveVideo():
    """A livestream, or a past livestream with a chat replay, usually returned
    from `YouTubeClient.get_video()`.

    Chat messages are delivered to handlers registered with `on('chat', ...)`
    once `play_chat` has been called and `run` is driving the timers.
    """

    def __init__(self, context, video_id, chat_continuation, is_replay,
                 title=None, watching_count=None, timers=None, **poller_params):
        """Create a LiveVideo object

        :param context: The capabilities of the owning client
        :type context: ClientContext
        :param video_id: The video id
        :type video_id: str
        :param chat_continuation: Continuation token used to load the chat
        :type chat_continuation: str
        :param is_replay: Whether this video is a replay or currently live
        :type is_replay: bool
        :param title: Title of the video, defaults to None
        :type title: str, optional
        :param watching_count: Number of people watching the livestream
            (or number of views, for a replay), defaults to None
        :type watching_count: int, optional
        :param timers: Timer facility to run tasks on. May be shared between
            videos, defaults to None (create one)
        :type timers: Timers, optional
        """
        self.video_id = video_id
        self.title = title
        self.is_replay = is_replay
        self.watching_count = watching_count

        self.timers = timers or Timers()
        self._timeout_event = None
        self.channel = EventChannel()
        self.poller = ContinuationPoller(
            context, chat_continuation, is_replay, self.channel, self.timers, **poller_params)

    @property
    def chat_continuation(self):
        """Current continuation token used to load the next chat messages"""
        return self.poller.state.continuation

    @property
    def is_chat_playing(self):
        return self.poller.is_playing

    def on(self, event, handler):
        """Register a handler for an event. Events are `chat` (called with
        each chat record), `error` (called with the error which stopped
        playback) and `end` (called when a chat replay has finished).
        """
        return self.channel.subscribe(event, handler)

    def off(self, event, handler):
        self.channel.unsubscribe(event, handler)

    def play_chat(self, delay=0):
        """Start polling for chat messages

        :param delay: Chat delay in milliseconds, defaults to 0
        :type delay: int, optional
        """
        self.poller.start(delay)

    def stop_chat(self, cancel_pending=None):
        """Stop polling for chat messages

        :param cancel_pending: Whether to also cancel messages which have been
            received but not yet delivered, defaults to None (use the value
            given when creating the video)
        :type cancel_pending: bool, optional
        """
        self.poller.stop(cancel_pending)
        self._cancel_timeout()

    def _cancel_timeout(self, payload=None):
        if self._timeout_event is not None:
            self.timers.cancel(self._timeout_event)
            self._timeout_event = None

    def run(self, timeout=None):
        """Deliver chat messages until playback stops and every scheduled
        message has been delivered

        :param timeout: Stop playback after this many seconds, defaults to
            None (run until stopped)
        :type timeout: float, optional
        """
        if timeout is not None:
            def on_timeout():
                self._timeout_event = None
                log('debug', f'Timeout occurred after {timeout} seconds.')
                self.stop_chat(cancel_pending=True)

            self._cancel_timeout()
            self._timeout_event = self.timers.call_later(timeout, on_timeout)

        # playback may also stop by itself
        self.on('end', self._cancel_timeout)
        self.on('error', self._cancel_timeout)
        try:
            self.timers.run()
        finally:
            self.off('end', self._cancel_timeout)
            self.off('error', self._cancel_timeout)

    def __repr__(self):
        return '<{} {} {!r}>'.format(self.__class__.__name__, self.video_id, self.title)
