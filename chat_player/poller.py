"""Polling of the live chat endpoints."""

from .actions import extract_chat_actions
from .parsing import ChatRecordParser
from .tracking import DedupTracker
from .scheduling import (
    Timers,
    PlaybackScheduler
)
from .errors import (
    TransportError,
    ParsingError,
    RetriesExceeded,
    InvalidParameter
)
from .utils.core import (
    multi_get,
    int_or_none,
    backoff_seconds
)
from .debugging import (
    log,
    debug_log
)


class PollState():
    """Mutable state of chat playback for one video."""

    def __init__(self, is_replay, continuation):
        self.is_replay = is_replay
        self.is_playing = False
        self.delay_ms = 0
        self.start_time_ms = None
        self.continuation = continuation
        self.next_poll_delay_ms = None

        # Handle of the pending request, if any
        self.poll_timer = None

        # Number of consecutive failed requests
        self.failed_attempts = 0


class ContinuationPoller():
    """Repeatedly exchanges the current continuation token for the next batch
    of chat actions, and schedules the delivery of the chat messages they
    contain as `chat` events on the given channel.

    Each cycle: request, extract, parse, deduplicate, schedule, then wait
    before requesting again with the newest continuation.
    """

    # Higher values replace lower ones
    _CONTINUATION_PRECEDENCE = {
        'timedContinuationData': 0,
        'liveChatReplayContinuationData': 0,
        'reloadContinuationData': 0,
        'invalidationContinuationData': 1,
        'playerSeekContinuationData': 2,
    }

    _DEFAULT_POLL_DELAY_MS = 1000

    # Timeouts above this risk missing messages, since a single response
    # only goes back around 10 seconds.
    _MAX_TIMEOUT_MS = 8000

    def __init__(self, context, continuation, is_replay, channel, timers=None,
                 max_attempts=5, retry_timeout=None, cancel_pending_on_stop=False):
        """Create a ContinuationPoller object

        :param context: The capabilities of the owning client
        :type context: ClientContext
        :param continuation: The initial continuation token
        :type continuation: str
        :param is_replay: Whether the chat is a replay
        :type is_replay: bool
        :param channel: Channel to publish `chat`, `error` and `end` events on
        :type channel: EventChannel
        :param timers: The timer facility, defaults to None (create one)
        :type timers: Timers, optional
        :param max_attempts: Maximum number of consecutive failed requests
            before playback is stopped, defaults to 5
        :type max_attempts: int, optional
        :param retry_timeout: Number of seconds to wait before retrying a
            failed request, defaults to None (use exponential backoff, i.e.
            immediate, 1s, 2s, 4s, 8s, ...)
        :type retry_timeout: float, optional
        :param cancel_pending_on_stop: Whether stopping playback also cancels
            messages which are scheduled but not yet delivered, defaults to False
        :type cancel_pending_on_stop: bool, optional
        :raises InvalidParameter: if max_attempts is less than 1
        """
        self.context = context
        self.channel = channel
        self.timers = timers or Timers()

        if max_attempts < 1:
            raise InvalidParameter(
                f'max_attempts must be at least 1, not {max_attempts}')

        self.max_attempts = max_attempts
        self.retry_timeout = retry_timeout
        self.cancel_pending_on_stop = cancel_pending_on_stop

        self.state = PollState(is_replay, continuation)
        self.parser = ChatRecordParser(context)
        self.tracker = DedupTracker()
        self.scheduler = PlaybackScheduler(self.timers)

        self.last_error = None

    def _now_ms(self):
        return self.timers.time() * 1000

    @property
    def is_playing(self):
        return self.state.is_playing

    def start(self, delay_ms=0):
        """Start polling, unless already playing

        :param delay_ms: Number of milliseconds to delay each message by,
            defaults to 0
        :type delay_ms: int, optional
        """
        state = self.state
        if state.is_playing:
            return

        state.delay_ms = delay_ms
        self.scheduler.delay_ms = delay_ms
        state.is_playing = True
        state.failed_attempts = 0
        self.last_error = None

        if state.start_time_ms is None:
            state.start_time_ms = self._now_ms()

        log('debug', f'Started chat playback (delay: {delay_ms}ms).')
        self.poll()

    def stop(self, cancel_pending=None):
        """Stop polling. Messages which have already been scheduled are
        still delivered, unless `cancel_pending` is set.

        :param cancel_pending: Whether to cancel scheduled messages, defaults
            to None (use the value given when creating the poller)
        :type cancel_pending: bool, optional
        """
        state = self.state
        state.is_playing = False

        if state.poll_timer is not None:
            self.timers.cancel(state.poll_timer)
            state.poll_timer = None

        if cancel_pending is None:
            cancel_pending = self.cancel_pending_on_stop
        if cancel_pending:
            self.scheduler.cancel_pending()

        log('debug', 'Stopped chat playback.')

    def _arm(self, delay_ms):
        state = self.state
        if not state.is_playing:
            return
        state.next_poll_delay_ms = delay_ms
        log('debug', f'Next request in {delay_ms}ms.')
        state.poll_timer = self.timers.call_later(delay_ms / 1000, self.poll)

    def build_request(self):
        state = self.state
        return {
            'continuation': state.continuation,
            'currentPlayerState': {
                'playerOffsetMs': str(int(self._now_ms() - state.start_time_ms))
            }
        }

    def poll(self):
        """Run one request/response cycle and arm the timer for the next one."""
        state = self.state
        state.poll_timer = None
        if not state.is_playing:
            return

        try:
            response = self.context.post(
                self.context.endpoint(state.is_replay), self.build_request())
        except TransportError as e:
            self._on_transport_error(e)
            return

        state.failed_attempts = 0

        info = multi_get(response, 'continuationContents', 'liveChatContinuation')
        if not isinstance(info, dict):
            log('warning', 'No live chat continuation found in response, retrying with the previous continuation.')
            log('debug', f'Response: {response}')
            self._arm(self._DEFAULT_POLL_DELAY_MS)
            return

        actions = info.get('actions') or []
        self.process_actions(actions)

        selected = self.select_continuation(info.get('continuations'))
        if selected is None:
            if state.is_replay and not actions:
                log('info', 'Reached the end of the chat replay.')
                self.stop()
                self.channel.publish('end')
                return

            log('warning', 'No known continuation found in response, retrying with the previous continuation.')
            log('debug', f"Continuations: {info.get('continuations')}")
            timeout_ms = None
        else:
            continuation_key, continuation_info = selected
            log('debug', f'Continuation type: {continuation_key}')
            state.continuation = continuation_info['continuation']
            timeout_ms = int_or_none(continuation_info.get('timeoutMs'))

        self._arm(self.next_poll_delay(timeout_ms))

    def next_poll_delay(self, timeout_ms=None):
        """Get the number of milliseconds to wait before the next request

        A positive playback delay is used as is, even above 8000. Longer
        delays make fewer requests, but messages that come and go from the
        live chat between two requests may be missed.

        :param timeout_ms: Timeout provided by the response, defaults to None
        :type timeout_ms: int, optional
        :return: The playback delay if positive, otherwise the timeout of the
            response (clamped to between 0 and 8000), otherwise 1000
        :rtype: int
        """
        if self.state.delay_ms > 0:
            return self.state.delay_ms
        if timeout_ms is not None:
            return max(min(timeout_ms, self._MAX_TIMEOUT_MS), 0)
        return self._DEFAULT_POLL_DELAY_MS

    @classmethod
    def select_continuation(cls, continuations):
        """Select the continuation to use for the next request. A player seek
        continuation replaces an invalidation continuation, which replaces
        a timed (or replay) continuation.

        :param continuations: The `continuations` list of a `liveChatContinuation`
        :type continuations: list
        :return: The key and data of the selected continuation, or None if no
            known continuation was found
        :rtype: tuple(str, dict)
        """
        selected = None
        selected_precedence = -1

        for cont in continuations or []:
            if not isinstance(cont, dict):
                continue

            for continuation_key, continuation_info in cont.items():
                precedence = cls._CONTINUATION_PRECEDENCE.get(continuation_key)
                if precedence is None:
                    debug_log(f'Unknown continuation: {continuation_key}', cont)
                    continue

                if not isinstance(continuation_info, dict) or not continuation_info.get('continuation'):
                    log('debug', f'Continuation has no token: {continuation_key}')
                    continue

                if precedence > selected_precedence:
                    selected = (continuation_key, continuation_info)
                    selected_precedence = precedence

        return selected

    def process_actions(self, actions):
        """Parse, deduplicate and schedule the chat messages of a response

        :param actions: The `actions` list of a `liveChatContinuation`
        :type actions: list
        :return: Number of messages scheduled
        :rtype: int
        """
        state = self.state
        scheduled = 0

        for action in extract_chat_actions(actions, state.is_replay, state.start_time_ms):
            try:
                record = self.parser.parse(action)
            except ParsingError as e:
                log('warning', f'Skipping chat message which could not be parsed: {e}')
                continue

            if not self.tracker.accept(record):
                log('debug', f'Skipping duplicate chat message: {record.id}')
                continue

            self.scheduler.schedule(record, self._emit)
            scheduled += 1

        log('debug', f'Scheduled {scheduled} of {len(actions)} actions.')
        return scheduled

    def _emit(self, record):
        self.channel.publish('chat', record)

    def _on_transport_error(self, error):
        state = self.state
        state.failed_attempts += 1

        if state.failed_attempts >= self.max_attempts:
            self.last_error = RetriesExceeded(
                'Maximum number of retries has been reached ({}).'.format(self.max_attempts))
            log('error', [error, self.last_error])
            self.stop()
            self.channel.publish('error', self.last_error)
            return

        time_to_sleep = backoff_seconds(state.failed_attempts, self.retry_timeout)
        log('warning', 'Retry #{} (sleep for {}s). {} ({})'.format(
            state.failed_attempts, time_to_sleep, error, error.__class__.__name__))
        self._arm(time_to_sleep * 1000)
